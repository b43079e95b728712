# fixmyprompts/scorer/prompt_score.py
from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from fixmyprompts.scorer.dimensions import (
    ACTION_VERBS,
    IDEAL_MAX_LENGTH,
    IDEAL_MIN_LENGTH,
    MAX_LENGTH,
    MIN_LENGTH,
    SPECIFIC_PHRASES,
    VAGUE_WORDS,
    VARIETY_FULL_CREDIT,
    VARIETY_HALF_CREDIT,
    WEIGHTS,
    Dimension,
)


def _word_pattern(phrases: Sequence[str]) -> Pattern[str]:
    # multi-word phrases tolerate any run of whitespace between words
    alternatives = [r"\s+".join(re.escape(w) for w in p.split()) for p in phrases]
    return re.compile(r"\b(?:" + "|".join(alternatives) + r")\b", re.IGNORECASE)


_SENTENCE_MARK = re.compile(r"[?.]")
_ACTION_RE = _word_pattern(ACTION_VERBS)
_SPECIFIC_RE = _word_pattern(SPECIFIC_PHRASES)
_VAGUE_RE = _word_pattern(VAGUE_WORDS)
_DUPLICATE_RE = re.compile(r"\b(\w+)\s+\1\b", re.IGNORECASE)
_TOKEN_RE = re.compile(r"\w+")

TIP_TOO_SHORT = "Too short: add context, the audience and the output you expect."
TIP_TOO_LONG = "Too long: trim the fluff and narrow the focus to one request."

TIPS: Dict[Dimension, str] = {
    Dimension.CLARITY: "Start with a clear action verb like 'Explain', 'Compare' or 'Generate'.",
    Dimension.SPECIFICITY: "Say who it is for or the format you want, e.g. 'for beginners, as a table'.",
    Dimension.VAGUENESS: "Replace vague words like 'good' or 'nice' with concrete traits.",
    Dimension.DUPLICATION: "Remove repeated words (e.g. 'very very').",
    Dimension.VARIETY: "Vary your wording; too many words are repeated.",
}


@dataclass(frozen=True)
class ScoreResult:
    score: int
    breakdown: Mapping[str, int]
    tips: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "breakdown": dict(self.breakdown),
            "tips": list(self.tips),
        }


def _half(weight: int) -> int:
    return weight // 2


def length_penalty(text: str) -> int:
    n = len(text)
    weight = WEIGHTS[Dimension.LENGTH]
    if n < MIN_LENGTH or n > MAX_LENGTH:
        return weight
    if n < IDEAL_MIN_LENGTH or n > IDEAL_MAX_LENGTH:
        return _half(weight)
    return 0


def clarity_penalty(text: str) -> int:
    if _SENTENCE_MARK.search(text) or _ACTION_RE.search(text):
        return 0
    return WEIGHTS[Dimension.CLARITY]


def specificity_penalty(text: str) -> int:
    return 0 if _SPECIFIC_RE.search(text) else WEIGHTS[Dimension.SPECIFICITY]


def vagueness_penalty(text: str) -> int:
    return WEIGHTS[Dimension.VAGUENESS] if _VAGUE_RE.search(text) else 0


def duplication_penalty(text: str) -> int:
    return WEIGHTS[Dimension.DUPLICATION] if _DUPLICATE_RE.search(text) else 0


def unique_ratio(text: str) -> float:
    tokens = _TOKEN_RE.findall(text.lower())
    if not tokens:
        return 1.0
    return len(set(tokens)) / len(tokens)


def variety_penalty(text: str) -> int:
    ratio = unique_ratio(text)
    weight = WEIGHTS[Dimension.VARIETY]
    if ratio >= VARIETY_FULL_CREDIT:
        return 0
    if ratio >= VARIETY_HALF_CREDIT:
        return _half(weight)
    return weight


_PENALTIES = {
    Dimension.LENGTH: length_penalty,
    Dimension.CLARITY: clarity_penalty,
    Dimension.SPECIFICITY: specificity_penalty,
    Dimension.VAGUENESS: vagueness_penalty,
    Dimension.DUPLICATION: duplication_penalty,
    Dimension.VARIETY: variety_penalty,
}


def tip_for(dimension: Dimension, text: str) -> str:
    if dimension is Dimension.LENGTH:
        return TIP_TOO_SHORT if len(text) < IDEAL_MIN_LENGTH else TIP_TOO_LONG
    return TIPS[dimension]


def rank_tips(breakdown: Mapping[str, int], text: str, limit: int = 3) -> List[str]:
    """
    Tips for penalised dimensions, biggest point loss first.
    Ties keep Dimension declaration order (sorted() is stable).
    """
    failed = [d for d in Dimension if breakdown.get(d.value, 0) > 0]
    failed = sorted(failed, key=lambda d: -breakdown[d.value])
    return [tip_for(d, text) for d in failed[:limit]]


class PromptScorer:
    """
    Rule-based prompt quality scorer (no model, no I/O).

    Six independent penalties are subtracted from 100:
    - length:      character count against the 20-500 / 50-250 bands
    - clarity:     a sentence mark or an action verb
    - specificity: an audience or format phrase ("for", "as a", "json", ...)
    - vagueness:   vague adjectives ("good", "nice", ...)
    - duplication: an immediately repeated word ("very very")
    - variety:     ratio of distinct to total words

    Instances hold no mutable state, so one scorer can be shared freely.
    """

    def __init__(self, max_tips: int = 3):
        self.max_tips = max_tips

    def score(self, text: Optional[str]) -> ScoreResult:
        text = text if isinstance(text, str) else ""

        breakdown = {d.value: fn(text) for d, fn in _PENALTIES.items()}
        total = sum(breakdown.values())
        score = max(0, min(100, 100 - total))

        return ScoreResult(
            score=score,
            breakdown=MappingProxyType(breakdown),
            tips=tuple(rank_tips(breakdown, text, self.max_tips)),
        )


_default_scorer = PromptScorer()


def score(text: Optional[str]) -> ScoreResult:
    return _default_scorer.score(text)
