from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fixmyprompts.cache_metrics import RewriteStats, reset_stats
from fixmyprompts.config import Settings
from fixmyprompts.errors import PromptValidationError, RateLimitError, RewriteError
from fixmyprompts.llm.openai_client import LLMError, OpenAITextClient
from fixmyprompts.logging_config import setup_logging
from fixmyprompts.rewrite.improve import RewriteService
from fixmyprompts.scorer.prompt_score import PromptScorer
from fixmyprompts.scorer.quality import badge, quality_label, rewrite_recommended
from fixmyprompts.scorer.report import build_report
from fixmyprompts.storage.feedback import FeedbackStore
from fixmyprompts.utils.cache import SimpleRateLimiter, TTLCache

logger = logging.getLogger(__name__)

# -----------------------------
# Data models
# -----------------------------


class PromptData(BaseModel):
    prompt: str | None = None


class RewriteData(BaseModel):
    originalPrompt: str | None = None
    category: str | None = "General"


class FeedbackData(BaseModel):
    liked: bool
    score: int = Field(ge=0, le=100)


def _build_llm_client(settings: Settings) -> Optional[OpenAITextClient]:
    # The scorer works without a key; only /rewrite needs the LLM.
    try:
        return OpenAITextClient(api_key=settings.openai_api_key, model=settings.model)
    except LLMError as e:
        logger.warning("LLM client disabled: %s", e)
        return None


def _empty_score() -> dict:
    return {
        "score": None,
        "label": None,
        "breakdown": {},
        "tips": [],
        "checks": [],
        "badge": badge(None),
        "rewrite_recommended": False,
    }


# -----------------------------
# App factory
# -----------------------------


def create_app(
    settings: Optional[Settings] = None,
    *,
    scorer: Optional[PromptScorer] = None,
    rewrite_service: Optional[RewriteService] = None,
    limiter: Optional[SimpleRateLimiter] = None,
    feedback_store: Optional[FeedbackStore] = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    scorer = scorer or PromptScorer()
    if rewrite_service is None:
        rewrite_service = RewriteService(
            _build_llm_client(settings),
            cache=TTLCache(ttl_seconds=settings.cache_ttl_seconds, max_items=settings.cache_max_items),
            stats=RewriteStats(),
            max_prompt_chars=settings.max_prompt_chars,
        )
    limiter = limiter or SimpleRateLimiter(
        max_requests=settings.rate_limit, window_seconds=settings.rate_window_seconds)
    feedback_store = feedback_store or FeedbackStore(settings.feedback_path)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        setup_logging(settings.log_level)
        logger.info("FixMyPrompts API starting model=%s llm_enabled=%s",
                    settings.model, rewrite_service.client is not None)
        yield

    app = FastAPI(title="FixMyPrompts API", lifespan=lifespan)
    app.state.settings = settings
    app.state.scorer = scorer
    app.state.rewrite_service = rewrite_service
    app.state.limiter = limiter
    app.state.feedback_store = feedback_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=False,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RewriteError)
    async def rewrite_error_handler(request: Request, exc: RewriteError):
        logger.warning("rewrite failed path=%s code=%s details=%s",
                       request.url.path, exc.code, exc.details)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        msg = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        err = PromptValidationError(msg)
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    # -----------------------------
    # Endpoints
    # -----------------------------

    @app.get("/")
    def root():
        return {"message": "FixMyPrompts API running"}

    @app.post("/score")
    def score_endpoint(data: PromptData):
        """
        Local (no-LLM) scoring for live typing:
        - score (0-100) + breakdown of penalties
        - up to 3 tips, biggest loss first
        - badge and checklist for the extension
        """
        text = data.prompt or ""
        if not text.strip():
            # nothing typed yet; the badge shows a dash
            return _empty_score()

        result = scorer.score(text)
        return {
            **result.to_dict(),
            "label": quality_label(result.score),
            "badge": badge(result.score),
            "checks": [c.to_dict() for c in build_report(text, result)],
            "rewrite_recommended": rewrite_recommended(result.score),
        }

    @app.post("/rewrite")
    def rewrite_endpoint(data: RewriteData, request: Request):
        # Rate limit (by client IP)
        ip = request.client.host if request.client else "unknown"
        if not limiter.allow(ip):
            rewrite_service.stats.incr("rate_limited")
            raise RateLimitError()

        result = rewrite_service.improve(data.originalPrompt, data.category)
        return result.to_dict()

    @app.post("/feedback")
    def feedback_endpoint(data: FeedbackData, background_tasks: BackgroundTasks):
        background_tasks.add_task(_record_feedback, feedback_store, data.liked, data.score)
        return {"ok": True}

    @app.get("/feedback/summary")
    def feedback_summary_endpoint():
        return feedback_store.summary()

    @app.get("/stats")
    def stats_endpoint():
        cache = rewrite_service.cache
        return {
            "rewrite": {
                **rewrite_service.stats.to_dict(),
                "maxsize": cache.max_items,
                "ttl": cache.ttl,
                "currsize": len(cache),
                "evictions": cache.evictions,
            }
        }

    @app.post("/stats/reset")
    def stats_reset():
        reset_stats(rewrite_service.stats)
        limiter.reset()
        return {"ok": True}

    return app


def _record_feedback(store: FeedbackStore, liked: bool, score: int) -> None:
    # fire-and-forget: the extension never waits on this
    try:
        store.append(liked, score)
    except OSError:
        logger.exception("failed to write feedback")


app = create_app()
