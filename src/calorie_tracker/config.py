"""Application configuration."""

import os
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    openai_api_key: str
    openai_analysis_model: str = "gpt-5-mini"
    openai_suggestion_model: str = "gpt-5.2"
    openai_reasoning_effort: str | None = "low"
    openai_store: bool = False
    http_timeout_seconds: float = 60.0
    state_path: Path = Path(".calorie_tracker/state.json")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    timezone: str | None = None
    prefers_dark: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase(self) -> bool:
        """Return True when both Supabase credentials are configured."""
        return bool(self.supabase_url and self.supabase_service_key)


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the named IANA zone, or None to follow the host's local zone.

    With None, each instant is converted by the host's own rules, so daylight
    saving changes are honoured per timestamp.
    """
    if name:
        return ZoneInfo(name)
    return None
