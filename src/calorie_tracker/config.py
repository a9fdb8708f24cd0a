"""Application configuration."""

import os
from datetime import tzinfo
from typing import Literal
from zoneinfo import ZoneInfo

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["file", "supabase"] = "file"
    storage_dir: str = ".calorie_tracker"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_storage_table: str = "app_storage"
    analysis_api_url: str = "https://n8n.40r93.com/webhook/calories"
    analysis_timeout_seconds: float = 60.0
    default_locale: str = "en_US"
    timezone: str | None = None
    persistence_retries: int = 2
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def resolve_timezone(name: str | None) -> tzinfo | None:
    """Return the configured zone, or None to use the system local zone."""
    if name is None:
        return None
    cleaned = name.strip()
    if not cleaned or cleaned.lower() == "local":
        return None
    return ZoneInfo(cleaned)
