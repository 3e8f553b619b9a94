"""Logging setup for the ``lazyresult`` logger hierarchy.

Library modules log through ``logging.getLogger("lazyresult.<area>")``; nothing
is emitted until an application attaches a handler, either its own or the one
installed by :func:`configure_logging`.

Quick Start:
    >>> from lazyresult.observability import configure_logging
    >>> configure_logging(format="text", level="DEBUG")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

import orjson

from lazyresult.foundation.config import get_settings

ROOT_LOGGER = "lazyresult"

logging.getLogger(ROOT_LOGGER).addHandler(logging.NullHandler())

# Attributes every LogRecord carries; anything else came in via ``extra=``
_RESERVED = frozenset(vars(logging.makeLogRecord({})).keys()) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED}


class TextFormatter(logging.Formatter):
    """Human-readable lines. Format: timestamp [level] logger: message key=value ..."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        extras = " ".join(f"{k}={v!r}" for k, v in sorted(_extras(record).items()))
        line = f"{ts} [{record.levelname.lower()}] {record.name}: {record.getMessage()}"
        if extras:
            line = f"{line} {extras}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines output for log aggregation."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=repr, option=orjson.OPT_NON_STR_KEYS).decode()


def configure_logging(
    format: str | None = None,  # noqa: A002 - shadows builtin but matches stdlib
    level: str | None = None,
    *,
    output: TextIO | None = None,
) -> logging.Handler:
    """Attach a stream handler to the ``lazyresult`` logger.

    Format is "text" or "json"; format and level default to ``LoggingSettings``.
    Calling again replaces the previously installed handler.
    """
    settings = get_settings().logging
    fmt = format or settings.format
    match fmt:
        case "text": formatter: logging.Formatter = TextFormatter()
        case "json": formatter = JsonFormatter()
        case _: raise ValueError(f"Unknown format: {fmt}. Use 'text' or 'json'")

    root = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in root.handlers if getattr(h, "_lazyresult", False)]:
        root.removeHandler(existing)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    handler._lazyresult = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(getattr(logging, (level or settings.level).upper(), logging.WARNING))
    return handler
