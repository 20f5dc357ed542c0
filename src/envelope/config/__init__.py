"""Configuration: environment-driven settings for failure logging."""

from .settings import EnvelopeSettings, LoggingSettings, clear_settings_cache, get_settings

__all__ = ["EnvelopeSettings", "LoggingSettings", "clear_settings_cache", "get_settings"]
