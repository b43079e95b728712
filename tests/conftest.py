import pytest
from fastapi.testclient import TestClient

from fixmyprompts.api import create_app
from fixmyprompts.config import Settings
from fixmyprompts.rewrite.improve import RewriteService
from fixmyprompts.storage.feedback import FeedbackStore
from fixmyprompts.utils.cache import SimpleRateLimiter, TTLCache


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeLLMClient:
    """Stands in for OpenAITextClient; records calls, never touches the network."""

    def __init__(self, reply="Explain the topic clearly for a beginner, as a table.", error=None):
        self.model = "fake-model"
        self.reply = reply
        self.error = error
        self.calls = []

    def complete_text(self, system, user, temperature=0.7, max_tokens=1024):
        self.calls.append({
            "system": system,
            "user": user,
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def llm():
    return FakeLLMClient()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key=None,
        feedback_path=tmp_path / "feedback.jsonl",
        rate_limit=2,
        rate_window_seconds=60,
    )


@pytest.fixture
def make_client(settings):
    def _make(llm_client=None, limiter=None):
        service = RewriteService(
            llm_client,
            cache=TTLCache(ttl_seconds=600, max_items=50),
            max_prompt_chars=settings.max_prompt_chars,
        )
        app = create_app(
            settings,
            rewrite_service=service,
            limiter=limiter or SimpleRateLimiter(max_requests=settings.rate_limit, window_seconds=60),
            feedback_store=FeedbackStore(settings.feedback_path),
        )
        return TestClient(app)

    return _make


@pytest.fixture
def client(make_client, llm):
    return make_client(llm)
