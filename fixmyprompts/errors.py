# fixmyprompts/errors.py
from __future__ import annotations

from typing import Any, Dict, Optional


class RewriteError(Exception):
    """
    Base class for failures of the rewrite proxy.
    Each subclass knows its HTTP status and whether the user can retry.
    """
    code = "rewrite_failed"
    status_code = 500
    retryable = False
    user_message = "Failed to improve prompt."

    def __init__(self, details: Optional[str] = None):
        super().__init__(details or self.user_message)
        self.details = details or self.user_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "details": self.details,
            "retryable": self.retryable,
        }


class TransientNetworkError(RewriteError):
    code = "network_error"
    status_code = 503
    retryable = True
    user_message = "Try again later."


class PromptValidationError(RewriteError):
    code = "invalid_prompt"
    status_code = 400
    user_message = "Please enter a prompt."


class UpstreamError(RewriteError):
    code = "upstream_error"
    status_code = 502
    retryable = True
    user_message = "The language model failed to answer. Try again later."


class RateLimitError(RewriteError):
    code = "rate_limited"
    status_code = 429
    retryable = True
    user_message = "Too many requests. Please wait a bit and try again."

    def __init__(self, details: Optional[str] = None, quota: bool = False):
        super().__init__(details)
        if quota:
            self.code = "insufficient_quota"


class LLMNotConfiguredError(RewriteError):
    code = "llm_not_configured"
    status_code = 503
    user_message = "LLM not configured. Set OPENAI_API_KEY and restart the backend."
