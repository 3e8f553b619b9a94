"""Foundation - configuration shared by the rest of lazyresult."""

from __future__ import annotations

from .config import (
    LazyResultSettings,
    LoggingSettings,
    MemoSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Config
    "LazyResultSettings", "get_settings", "clear_settings_cache",
    "MemoSettings", "LoggingSettings",
]
