"""Error kinds raised and carried by deferred results.

Provides error codes, the library's own exception types, suppressed-cause
bookkeeping and a structured snapshot of an error's causal chain.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import Self

from pydantic import BaseModel

SNEAKY_THROW_MESSAGE = "Thrown checked exception, wrapping in RuntimeError"
TAP_ERROR_MESSAGE = "Error in tap"
NOT_PRESENT_MESSAGE = "Value is not present"
NONE_VALUE_MESSAGE = "Success cannot hold a None value"

# Guards ErrorInfo against pathological cause chains
_MAX_DEPTH = 32


class ErrorCode(StrEnum):
    """Machine-readable codes for library errors."""
    CONTRACT_VIOLATION = "CONTRACT_VIOLATION"
    CHECKED_ERROR = "CHECKED_ERROR"
    VALUE_NOT_PRESENT = "VALUE_NOT_PRESENT"
    TAP_FAILED = "TAP_FAILED"
    UNKNOWN = "UNKNOWN"


class ResultError(Exception):
    """Base for errors produced by lazyresult itself."""

    code: ErrorCode = ErrorCode.UNKNOWN


class ResultContractError(ResultError, ValueError):
    """A constructor argument or a user callback broke the Result contract."""

    code = ErrorCode.CONTRACT_VIOLATION


class SneakyThrowError(ResultError, RuntimeError):
    """Wraps a declared (checked) error raised through ``of_sneaky_throws``.

    The original error is always available as ``__cause__``.
    """

    code = ErrorCode.CHECKED_ERROR

    @classmethod
    def wrap(cls, exc: BaseException) -> Self:
        wrapped = cls(SNEAKY_THROW_MESSAGE)
        wrapped.__cause__ = exc
        return wrapped


class ValueNotPresentError(ResultError, LookupError):
    """Raised by results built from an absent optional value."""

    code = ErrorCode.VALUE_NOT_PRESENT


class TapError(ResultError, RuntimeError):
    """Marker attached to an error raised by a ``tap`` callback."""

    code = ErrorCode.TAP_FAILED


class CheckedError(Exception):
    """Subclass to declare an error as checked for ``of_sneaky_throws``."""


# ─────────────────────────────────────────────────────────────────────────────
# Suppressed causes
# ─────────────────────────────────────────────────────────────────────────────


def add_suppressed(error: BaseException, other: BaseException) -> None:
    """Attach ``other`` to ``error`` as a secondary cause without replacing it.

    The secondary error is kept in ``error.__suppressed__`` and mentioned in a
    traceback note so it is visible when ``error`` is printed. An ``other``
    matching an attached entry by type and message is skipped, so a failure
    forced repeatedly does not pile up duplicates.
    """
    if other is error:
        return
    suppressed: list[BaseException] | None = getattr(error, "__suppressed__", None)
    if suppressed is None:
        suppressed = []
        error.__suppressed__ = suppressed  # type: ignore[attr-defined]
    key = (type(other), str(other))
    if any((type(s), str(s)) == key for s in suppressed):
        return
    suppressed.append(other)
    error.add_note(f"Suppressed: {type(other).__name__}: {other}")


def get_suppressed(error: BaseException) -> tuple[BaseException, ...]:
    """Secondary causes attached with :func:`add_suppressed`, oldest first."""
    return tuple(getattr(error, "__suppressed__", ()))


# ─────────────────────────────────────────────────────────────────────────────
# Classification & diagnostics
# ─────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=256)
def _classify_type(exc_type: type[BaseException]) -> ErrorCode:
    for klass in exc_type.__mro__:
        if (code := getattr(klass, "code", None)) is not None and isinstance(code, ErrorCode):
            return code
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Map an exception to its error code; foreign errors are UNKNOWN."""
    return _classify_type(type(exc))


class ErrorInfo(BaseModel):
    """Snapshot of an error with its full causal chain.

    Example:
        >>> try:
        ...     raise KeyError("k")
        ... except KeyError as e:
        ...     info = ErrorInfo.from_exception(e)
        >>> info.kind
        'KeyError'
    """

    model_config = {"frozen": True}

    kind: str
    message: str
    code: ErrorCode = ErrorCode.UNKNOWN
    cause: ErrorInfo | None = None
    suppressed: tuple[ErrorInfo, ...] = ()

    @classmethod
    def from_exception(cls, exc: BaseException, *, _depth: int = 0) -> Self:
        """Build from an exception, following ``__cause__`` and suppressed errors."""
        nested = _depth < _MAX_DEPTH
        cause = exc.__cause__
        return cls(
            kind=type(exc).__name__,
            message=str(exc),
            code=classify_exception(exc),
            cause=cls.from_exception(cause, _depth=_depth + 1) if cause is not None and nested else None,
            suppressed=tuple(cls.from_exception(s, _depth=_depth + 1) for s in get_suppressed(exc)) if nested else (),
        )

    def render(self, indent: int = 0) -> str:
        """Format the chain as indented lines."""
        pad = "  " * indent
        lines = [f"{pad}{self.kind}: {self.message}" + (f" [{self.code}]" if self.code != ErrorCode.UNKNOWN else "")]
        if self.cause:
            lines.append(f"{pad}  caused by:")
            lines.append(self.cause.render(indent + 2))
        for s in self.suppressed:
            lines.append(f"{pad}  suppressed:")
            lines.append(s.render(indent + 2))
        return "\n".join(lines)

    __str__ = render


ErrorInfo.model_rebuild()
