"""API tests for scoring, rewrite, feedback and stats endpoints."""

from fixmyprompts.llm.openai_client import LLMError, LLMQuotaError
from tests.conftest import FakeLLMClient


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "running" in resp.json()["message"]


class TestScore:
    def test_scores_prompt(self, client):
        resp = client.post("/score", json={"prompt": "Please please explain this clearly for a beginner."})
        assert resp.status_code == 200, resp.text
        body = resp.json()

        assert body["score"] == 90
        assert body["breakdown"]["duplication"] == 10
        assert len(body["tips"]) == 1
        assert body["label"] == "strong"
        assert body["badge"] == {"text": "90", "color": "#2ecc71"}
        assert body["rewrite_recommended"] is False
        assert [c["dimension"] for c in body["checks"] if not c["passed"]] == ["duplication"]

    def test_empty_prompt_means_no_score(self, client):
        for payload in ({"prompt": "   "}, {"prompt": ""}, {}):
            body = client.post("/score", json=payload).json()
            assert body["score"] is None
            assert body["badge"]["text"] == "–"
            assert body["tips"] == []

    def test_weak_prompt(self, client):
        body = client.post("/score", json={"prompt": "go go go go"}).json()
        assert body["score"] == 15
        assert body["label"] == "weak"
        assert body["rewrite_recommended"] is True
        assert len(body["tips"]) == 3


class TestRewrite:
    def test_success_then_cache_hit(self, client, llm):
        payload = {"originalPrompt": "write a poem about cats", "category": "Creative Writing"}
        first = client.post("/rewrite", json=payload)
        assert first.status_code == 200, first.text
        assert first.json()["improvedPrompt"] == llm.reply
        assert first.json()["category"] == "Creative Writing"
        assert first.json()["meta"]["cache"] == "miss"

        second = client.post("/rewrite", json=payload)
        assert second.json()["meta"]["cache"] == "hit"
        assert len(llm.calls) == 1

    def test_unknown_category_defaults_to_general(self, client):
        resp = client.post("/rewrite", json={"originalPrompt": "plan a trip", "category": "Travel"})
        assert resp.json()["category"] == "General"

    def test_empty_prompt(self, client):
        resp = client.post("/rewrite", json={"originalPrompt": "  ", "category": "General"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_prompt"
        assert resp.json()["retryable"] is False

    def test_too_long(self, client):
        resp = client.post("/rewrite", json={"originalPrompt": "x" * 2001})
        assert resp.status_code == 400
        assert "2000" in resp.json()["details"]

    def test_bad_body_type(self, client):
        resp = client.post("/rewrite", json={"originalPrompt": ["not", "text"]})
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_prompt"

    def test_rate_limited(self, client):
        payload = {"originalPrompt": "write a poem about cats"}
        assert client.post("/rewrite", json=payload).status_code == 200
        assert client.post("/rewrite", json=payload).status_code == 200

        resp = client.post("/rewrite", json=payload)
        assert resp.status_code == 429
        assert resp.json()["error"] == "rate_limited"
        assert resp.json()["retryable"] is True
        assert client.get("/stats").json()["rewrite"]["rate_limited"] == 1

    def test_upstream_failure_is_surfaced(self, make_client):
        client = make_client(FakeLLMClient(error=LLMError("500 from provider")))
        resp = client.post("/rewrite", json={"originalPrompt": "write a poem"})
        assert resp.status_code == 502
        assert resp.json() == {
            "error": "upstream_error",
            "details": "The language model failed to answer. Try again later.",
            "retryable": True,
        }

    def test_quota(self, make_client):
        client = make_client(FakeLLMClient(error=LLMQuotaError("insufficient_quota", quota=True)))
        resp = client.post("/rewrite", json={"originalPrompt": "write a poem"})
        assert resp.status_code == 429
        assert resp.json()["error"] == "insufficient_quota"

    def test_not_configured(self, make_client):
        resp = make_client(None).post("/rewrite", json={"originalPrompt": "write a poem"})
        assert resp.status_code == 503
        assert resp.json()["error"] == "llm_not_configured"


class TestFeedback:
    def test_feedback_is_recorded(self, client):
        assert client.post("/feedback", json={"liked": True, "score": 80}).json() == {"ok": True}
        assert client.post("/feedback", json={"liked": False, "score": 40}).json() == {"ok": True}

        summary = client.get("/feedback/summary").json()
        assert summary == {"events": 2, "likes": 1, "dislikes": 1, "avg_score": 60.0}

    def test_score_out_of_range(self, client):
        resp = client.post("/feedback", json={"liked": True, "score": 150})
        assert resp.status_code == 400


class TestStats:
    def test_counts_and_reset(self, client):
        client.post("/rewrite", json={"originalPrompt": "write a poem"})
        client.post("/rewrite", json={"originalPrompt": "write a poem"})

        stats = client.get("/stats").json()["rewrite"]
        assert stats["requests"] == 2
        assert stats["successes"] == 2
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["currsize"] == 1
        assert stats["hit_rate"] == 0.5

        assert client.post("/stats/reset").json() == {"ok": True}
        stats = client.get("/stats").json()["rewrite"]
        assert stats["requests"] == 0
        assert stats["hits"] == 0

    def test_reset_clears_rate_limit_window(self, client):
        payload = {"originalPrompt": "write a poem about cats"}
        for _ in range(2):
            client.post("/rewrite", json=payload)
        assert client.post("/rewrite", json=payload).status_code == 429

        client.post("/stats/reset")
        assert client.post("/rewrite", json=payload).status_code == 200


def test_cors_preflight(client):
    resp = client.options(
        "/score",
        headers={
            "Origin": "chrome-extension://abcdef",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
