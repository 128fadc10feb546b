"""Environment-backed settings for Polly."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import SERVICE_NAME


class AppSettings(BaseSettings):
    """Application configuration sourced from ``POLLY_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="POLLY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    home: str = ""
    service_name: str = SERVICE_NAME
    log_level: str = "INFO"

    build_branch: str = "unknown"
    build_commit: str = "unknown"
    build_epoch: int = Field(default=0, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of application settings."""

    return AppSettings()
