"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the reclamation task and
the maintenance scripts share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path

import os

from pydantic import AnyHttpUrl, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file without extra deps."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


_load_env_file()


class _EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")


class EventLogSettings(_EnvSettings):
    """Connection details for the external QR event log."""

    base_url: AnyHttpUrl = Field(
        "https://accesscontrolserver.onrender.com",
        validation_alias="EVENT_LOG_BASE_URL",
    )
    timeout_seconds: float = Field(10.0, validation_alias="EVENT_LOG_TIMEOUT")
    read_attempts: int = Field(
        1,
        ge=1,
        validation_alias="EVENT_LOG_READ_ATTEMPTS",
        description="Attempts for the side-effect free reachability check.",
    )


class MessagingSettings(_EnvSettings):
    """Credentials for the SOLAPI messaging channel."""

    api_key: str = Field(..., validation_alias="API_KEY")
    api_secret: str = Field(..., validation_alias="API_SECRET")
    sender_number: str = Field(..., validation_alias="SENDER_NO")
    base_url: AnyHttpUrl = Field(
        "https://api.solapi.com", validation_alias="SOLAPI_BASE_URL"
    )

    @field_validator("sender_number")
    @classmethod
    def _strip_hyphens(cls, value: str) -> str:
        """Accept sender numbers written as 010-1234-5678."""
        return value.replace("-", "")


class TokenSettings(_EnvSettings):
    """Defaults stamped on issued tokens and reclamation tuning."""

    purpose: str = Field("Visitor", validation_alias="TOKEN_PURPOSE")
    device_id: str = Field("device", validation_alias="TOKEN_DEVICE_ID")
    reclaim_interval_seconds: float = Field(
        0,
        ge=0,
        validation_alias="TOKEN_RECLAIM_INTERVAL",
        description="Period of the expired-record sweep. Zero disables it.",
    )
    retention_seconds: int = Field(
        3600,
        ge=0,
        validation_alias="TOKEN_RETENTION_SECONDS",
        description="How long expired records are kept before reclamation.",
    )


class AppSettings(_EnvSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    public_host: AnyHttpUrl = Field(
        "http://localhost:3000",
        validation_alias="PUBLIC_HOST",
        description="Externally reachable base URL embedded in QR links.",
    )
    event_log: EventLogSettings = Field(default_factory=EventLogSettings)
    messaging: MessagingSettings = Field(default_factory=MessagingSettings)
    tokens: TokenSettings = Field(default_factory=TokenSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "EventLogSettings",
    "MessagingSettings",
    "TokenSettings",
    "get_settings",
]
