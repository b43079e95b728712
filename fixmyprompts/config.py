# fixmyprompts/config.py
from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional, Tuple

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_FEEDBACK_PATH = Path(__file__).resolve().parent / "storage" / "feedback.jsonl"


class Settings(BaseSettings):
    """Service settings; every field reads FMP_<NAME> except the OpenAI key."""

    openai_api_key: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"))
    model: str = "gpt-4o-mini"
    max_prompt_chars: int = 2000

    # rewrite endpoint: 20 requests / minute per client IP
    rate_limit: int = 20
    rate_window_seconds: int = 60

    cache_ttl_seconds: int = 600
    cache_max_items: int = 500

    feedback_path: Path = DEFAULT_FEEDBACK_PATH
    allowed_origins: Annotated[Tuple[str, ...], NoDecode] = ("*",)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FMP_",
        env_file=".env",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @field_validator("openai_api_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v or None

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, v):
        # FMP_ALLOWED_ORIGINS is comma separated
        if isinstance(v, str):
            return tuple(x.strip() for x in v.split(",") if x.strip()) or ("*",)
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, v):
        return str(v).strip().upper() if v else "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()
