# fixmyprompts/rewrite/improve.py
# coding: utf-8

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

from fixmyprompts.cache_metrics import RewriteStats
from fixmyprompts.errors import (
    LLMNotConfiguredError,
    PromptValidationError,
    RateLimitError,
    TransientNetworkError,
    UpstreamError,
)
from fixmyprompts.llm.openai_client import LLMConnectionError, LLMError, LLMQuotaError
from fixmyprompts.rewrite.categories import Category, system_prompt
from fixmyprompts.utils.cache import TTLCache, normalize_prompt, prompt_key

logger = logging.getLogger(__name__)

# Bump when the instructions change so cached rewrites are not reused
SYSTEM_VERSION = "v1.1"

USER_TEMPLATE = 'Original prompt: "{prompt}"'

TEMPERATURE = 0.7
MAX_OUTPUT_TOKENS = 1024
MAX_PROMPT_CHARS = 2000

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")


class TextCompleter(Protocol):
    model: str

    def complete_text(self, system: str, user: str, temperature: float = ..., max_tokens: int = ...) -> str:
        ...


@dataclass(frozen=True)
class RewriteResult:
    improved_prompt: str
    category: Category
    cached: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "improvedPrompt": self.improved_prompt,
            "category": self.category.value,
            "meta": {"cache": "hit" if self.cached else "miss", "system_version": SYSTEM_VERSION},
        }


def _clean_improved(text: str) -> str:
    t = (text or "").strip()
    t = _FENCE_RE.sub("", t).strip()
    # models sometimes echo the prompt back inside quotes; only unwrap a
    # single quoted span, never '"a" ... "b"'
    if len(t) >= 2 and t[0] == t[-1] and t[0] in "\"'":
        inner = t[1:-1]
        if t[0] not in inner.replace("\\" + t[0], ""):
            t = inner.strip()
    return t


class RewriteService:
    """
    Thin proxy to the language model: validates the prompt, builds the
    category-specific instructions, caches results and translates client
    failures into RewriteError subclasses.
    """

    def __init__(
        self,
        client: Optional[TextCompleter],
        cache: Optional[TTLCache] = None,
        stats: Optional[RewriteStats] = None,
        max_prompt_chars: int = MAX_PROMPT_CHARS,
    ):
        self.client = client
        self.cache = cache if cache is not None else TTLCache(ttl_seconds=600, max_items=500)
        self.stats = stats if stats is not None else RewriteStats()
        self.max_prompt_chars = max_prompt_chars

    def _cache_key(self, prompt: str, category: Category) -> str:
        model_name = getattr(self.client, "model", "unknown")
        return prompt_key(SYSTEM_VERSION, model_name, category.value, normalize_prompt(prompt))

    def validate(self, original_prompt: Optional[str]) -> str:
        prompt = (original_prompt or "").strip()
        if not prompt:
            raise PromptValidationError("Please enter a prompt.")
        if len(prompt) > self.max_prompt_chars:
            raise PromptValidationError(
                f"Prompt is {len(prompt)} characters; the limit is {self.max_prompt_chars}.")
        return prompt

    def improve(self, original_prompt: Optional[str], category: Optional[str] = None) -> RewriteResult:
        self.stats.incr("requests")
        try:
            result = self._improve(original_prompt, category)
        except Exception:
            self.stats.incr("failures")
            raise
        self.stats.incr("successes")
        return result

    def _improve(self, original_prompt: Optional[str], category: Optional[str]) -> RewriteResult:
        prompt = self.validate(original_prompt)
        cat = Category.parse(category)

        if self.client is None:
            raise LLMNotConfiguredError()

        key = self._cache_key(prompt, cat)
        cached = self.cache.get(key)
        if cached is not None:
            self.stats.incr("hits")
            return RewriteResult(improved_prompt=cached, category=cat, cached=True)
        self.stats.incr("misses")

        try:
            raw = self.client.complete_text(
                system=system_prompt(cat),
                user=USER_TEMPLATE.format(prompt=prompt),
                temperature=TEMPERATURE,
                max_tokens=MAX_OUTPUT_TOKENS,
            )
        except LLMConnectionError as e:
            raise TransientNetworkError() from e
        except LLMQuotaError as e:
            if e.quota:
                raise RateLimitError(
                    "The model provider has no available quota. Try again later.", quota=True) from e
            raise RateLimitError() from e
        except LLMError as e:
            raise UpstreamError() from e

        improved = _clean_improved(raw)
        if not improved:
            raise UpstreamError("The language model returned an empty prompt. Try again.")

        self.cache.set(key, improved)
        self.stats.incr("sets")
        logger.info("rewrite ok category=%s chars_in=%d chars_out=%d",
                    cat.value, len(prompt), len(improved))
        return RewriteResult(improved_prompt=improved, category=cat)
