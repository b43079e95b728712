# fixmyprompts/llm/openai_client.py
from __future__ import annotations
import logging
import os
from typing import Optional

import openai
from openai import OpenAI

logger = logging.getLogger(__name__)


class LLMError(Exception):
    pass


class LLMConnectionError(LLMError):
    """Network failure or timeout talking to the provider."""


class LLMQuotaError(LLMError):
    """Rate limited by the provider; quota=True when billing/quota is exhausted."""

    def __init__(self, message: str, quota: bool = False):
        super().__init__(message)
        self.quota = quota


def clean_api_key(raw: Optional[str]) -> str:
    key = (raw or "").strip()
    # Guard against copy/paste mistakes like smart quotes or "Bearer ...".
    key = key.replace("“", "").replace("”", "").replace("‘", "").replace("’", "")
    key = key.strip("'\"")
    if key.lower().startswith("bearer "):
        key = key[7:].strip()
    return key


def classify_error(e: Exception) -> LLMError:
    msg = str(e)
    if isinstance(e, (openai.APIConnectionError, openai.APITimeoutError)):
        return LLMConnectionError(msg)
    if isinstance(e, openai.RateLimitError):
        # Make quota errors distinguishable from plain throttling
        quota = "insufficient_quota" in msg or "exceeded your current quota" in msg
        return LLMQuotaError(msg, quota=quota)
    return LLMError(msg)


class OpenAITextClient:
    def __init__(self, api_key: Optional[str] = None, model: str = "gpt-4o-mini"):
        key = clean_api_key(api_key or os.getenv("OPENAI_API_KEY"))
        if not key:
            raise LLMError("OPENAI_API_KEY not set.")

        try:
            key.encode("ascii")
        except UnicodeEncodeError as e:
            raise LLMError(
                "OPENAI_API_KEY contains non-ASCII characters. Remove quotes/smart quotes and keep only the raw key."
            ) from e

        self.client = OpenAI(api_key=key)
        self.model = model

    def complete_text(self, system: str, user: str, temperature: float = 0.7, max_tokens: int = 1024) -> str:
        """
        Single chat completion; returns the stripped assistant text ("" if none).
        """
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            logger.warning("OpenAI call failed: %s", e)
            raise classify_error(e) from e

        if not resp.choices:
            return ""
        return (resp.choices[0].message.content or "").strip()
