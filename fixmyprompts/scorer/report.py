# fixmyprompts/scorer/report.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from fixmyprompts.scorer.dimensions import IDEAL_MAX_LENGTH, IDEAL_MIN_LENGTH, Dimension
from fixmyprompts.scorer.prompt_score import ScoreResult


@dataclass(frozen=True)
class CheckItem:
    dimension: str
    title: str
    passed: bool
    detail: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


TITLES: Dict[Dimension, str] = {
    Dimension.LENGTH: "Length",
    Dimension.CLARITY: "Clear action",
    Dimension.SPECIFICITY: "Audience & format",
    Dimension.VAGUENESS: "Avoid vagueness",
    Dimension.DUPLICATION: "No repetition",
    Dimension.VARIETY: "Word variety",
}

FAILED_DETAILS: Dict[Dimension, str] = {
    Dimension.CLARITY: "No decisive verb detected. Start with a verb: 'Explain', 'Compare', 'Generate'.",
    Dimension.SPECIFICITY: "Audience / output style missing. Add: 'for beginner investors, in a 5-point table'.",
    Dimension.VAGUENESS: "Contains fuzzy words like 'good'. Replace with explicit traits: 'cost-effective', 'three detailed steps'.",
    Dimension.DUPLICATION: "Repeated word detected (e.g. 'very very'). Delete duplicates for clarity.",
    Dimension.VARIETY: "Same words repeated. Swap in synonyms: evaluate, analyse, assess.",
}


def _length_detail(n_chars: int) -> str:
    return (
        f"Your prompt is {n_chars} characters; models work best at "
        f"{IDEAL_MIN_LENGTH}-{IDEAL_MAX_LENGTH}. Trim fluff or add context as needed."
    )


def build_report(text: str, result: ScoreResult) -> List[CheckItem]:
    """
    Pass/fail checklist for the sidebar, one item per dimension in
    declaration order. A dimension passes when it lost no points.
    """
    text = text if isinstance(text, str) else ""
    items: List[CheckItem] = []
    for dim in Dimension:
        passed = result.breakdown.get(dim.value, 0) == 0
        if passed:
            detail = f"Nice job keeping {dim.value} on point."
        elif dim is Dimension.LENGTH:
            detail = _length_detail(len(text))
        else:
            detail = FAILED_DETAILS[dim]
        items.append(CheckItem(dimension=dim.value, title=TITLES[dim], passed=passed, detail=detail))
    return items
