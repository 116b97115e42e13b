"""
Runtime configuration helpers for the PawHub API and client.

Correctly loads DATABASE_URL and other variables from the .env file
located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required; usually supplied by .env
    database_url: str = Field(..., alias="DATABASE_URL")

    # Optional fields
    app_name: str = Field(default="PawHub", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")
    public_base_url: str = Field(default="http://localhost:8000", alias="PUBLIC_BASE_URL")

    # Client side
    api_base_url: str = Field(default="http://localhost:8000", alias="API_BASE_URL")
    remote_timeout: float = Field(default=15.0, alias="REMOTE_TIMEOUT")

    # Listing limits and retention
    feed_limit: int = Field(default=50, alias="FEED_LIMIT")
    explore_limit: int = Field(default=50, alias="EXPLORE_LIMIT")
    notification_limit: int = Field(default=50, alias="NOTIFICATION_LIMIT")
    story_ttl_hours: int = Field(default=24, alias="STORY_TTL_HOURS")
    notification_retention_days: int = Field(default=30, alias="NOTIFICATION_RETENTION_DAYS")

    # Auth
    jwt_secret_key: str | None = Field(default=None, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(default=1440, alias="JWT_EXPIRES_MINUTES")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore"
    )


class MissingSecretError(RuntimeError):
    """Raised when a required secret is unset or still a placeholder."""


_PLACEHOLDER_VALUES = frozenset({"changeme", "change-me", "placeholder", "example", "sample", "your-key-here"})


def is_placeholder(value: str | None) -> bool:
    if not value:
        return True
    normalized = value.strip().lower()
    return not normalized or normalized in _PLACEHOLDER_VALUES


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def require_jwt_secret() -> str:
    """Return the trimmed JWT signing key or raise :class:`MissingSecretError`."""

    value = get_settings().jwt_secret_key
    if is_placeholder(value):
        raise MissingSecretError("JWT_SECRET_KEY is required and must not use placeholder defaults")
    return value.strip()


__all__ = ["MissingSecretError", "Settings", "get_settings", "is_placeholder", "require_jwt_secret"]
