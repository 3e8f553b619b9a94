"""Observability: logging setup for lazyresult."""

from .logging import ROOT_LOGGER, JsonFormatter, TextFormatter, configure_logging

__all__ = ["ROOT_LOGGER", "configure_logging", "TextFormatter", "JsonFormatter"]
