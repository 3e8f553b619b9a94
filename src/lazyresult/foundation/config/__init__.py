"""Configuration management using pydantic-settings."""

from .settings import (
    LazyResultSettings,
    LoggingSettings,
    MemoSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "LazyResultSettings",
    "LoggingSettings",
    "MemoSettings",
    "clear_settings_cache",
    "get_settings",
]
