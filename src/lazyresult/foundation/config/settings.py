"""Environment-based configuration using pydantic-settings.

Example:
    >>> from lazyresult.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.memo.thread_safe
    False
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # LAZYRESULT_MEMO_THREAD_SAFE=true
    # LAZYRESULT_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class MemoSettings(BaseSettings):
    """Memoization of deferred results."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYRESULT_MEMO_",
        extra="ignore",
    )

    thread_safe: bool = Field(
        default=False,
        description="Guard the evaluated transition with a lock so concurrent forcing publishes one value",
    )


class LoggingSettings(BaseSettings):
    """Logging configuration for the ``lazyresult`` logger."""

    model_config = SettingsConfigDict(
        env_prefix="LAZYRESULT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class LazyResultSettings(BaseSettings):
    """Root settings, loaded from ``LAZYRESULT_``-prefixed environment variables.

    Example environment variables:
        LAZYRESULT_DEBUG=true
        LAZYRESULT_MEMO_THREAD_SAFE=true
        LAZYRESULT_LOG_FORMAT=json
    """

    model_config = SettingsConfigDict(
        env_prefix="LAZYRESULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    memo: MemoSettings = Field(default_factory=MemoSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


@lru_cache(maxsize=1)
def get_settings() -> LazyResultSettings:
    """Get the global settings instance (cached)."""
    return LazyResultSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() rereads the environment."""
    get_settings.cache_clear()
