"""lazyresult - Deferred, memoizing Result type for exception-free control flow.

Wraps a computation that may raise into a lazy value that is only run when
forced, caches successful outcomes, and composes through map/flat_map and
recovery combinators instead of try/except blocks.

Quick Start:
    >>> from lazyresult import Result, Success, Failure
    >>>
    >>> price = (
    ...     Result.of(lambda: {"price": "12.5"}["price"])
    ...     .map(float)
    ...     .tap(lambda p: print(f"price={p}"))
    ...     .catch_some(KeyError, lambda: Success(0.0))
    ... )
    >>> price.unsafe_get()
    price=12.5
    12.5

Recovery and defaults:
    >>> Failure(ValueError("boom")).map(lambda x: x + 1).or_else(-1)
    -1

Decorators:
    >>> from lazyresult import deferred
    >>> @deferred
    ... def ratio(a: int, b: int) -> float:
    ...     return a / b
    >>> ratio(1, 0).is_failure()
    True

Configuration (environment):
    LAZYRESULT_MEMO_THREAD_SAFE=true   # lock-guarded memoization
    LAZYRESULT_LOG_LEVEL=DEBUG         # used by configure_logging()
"""

from __future__ import annotations

__version__ = "0.1.0"

# Errors
from .errors import (
    CheckedError,
    ErrorCode,
    ErrorInfo,
    ResultContractError,
    ResultError,
    SneakyThrowError,
    TapError,
    ValueNotPresentError,
    add_suppressed,
    classify_exception,
    get_suppressed,
)

# Config
from .foundation.config import LazyResultSettings, clear_settings_cache, get_settings

# Result monad
from .monads import CellState, Failure, OnceCell, Result, Success, deferred, sequence, sneaky, traverse

# Observability
from .observability import configure_logging

__all__ = [
    "__version__",
    # Result monad
    "Result", "Success", "Failure",
    "sequence", "traverse", "deferred", "sneaky",
    "OnceCell", "CellState",
    # Errors
    "ErrorCode", "ErrorInfo", "ResultError", "ResultContractError", "SneakyThrowError",
    "ValueNotPresentError", "TapError", "CheckedError",
    "add_suppressed", "get_suppressed", "classify_exception",
    # Config
    "LazyResultSettings", "get_settings", "clear_settings_cache",
    # Observability
    "configure_logging",
]
