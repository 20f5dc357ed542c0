"""Environment-based configuration using pydantic-settings.

Example:
    >>> from envelope.config import get_settings
    >>> get_settings().logging.level
    'INFO'

    # Or with environment variables:
    # ENVELOPE_LOG_LEVEL=DEBUG
    # ENVELOPE_LOG_FORMAT=json
    # ENVELOPE_LOGGER_NAME=files-manager
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Failure logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ENVELOPE_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["console", "json", "none"] = "console"
    colors: bool | None = Field(default=None, description="Force ANSI colors (None = auto-detect)")
    include_traceback: bool = Field(default=False, description="Attach tracebacks of unstructured failures")

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class EnvelopeSettings(BaseSettings):
    """Root settings, loaded from ENVELOPE_* variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_prefix="ENVELOPE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")
    logger_name: str = Field(default="envelope", min_length=1, description="Name bound to failure log entries")
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> EnvelopeSettings:
    """Get the global settings instance (cached)."""
    return EnvelopeSettings()


def clear_settings_cache() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
