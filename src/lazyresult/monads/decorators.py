"""Decorators turning plain functions into Result-returning functions.

Example:
    >>> @deferred
    ... def parse(s: str) -> int:
    ...     return int(s)
    >>> parse("12").map(lambda x: x * 2).unsafe_get()
    24
    >>> parse("x").is_failure()
    True
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Callable, ParamSpec, TypeVar

from lazyresult.errors import CheckedError

from .result import ErrorKinds, Result

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger("lazyresult.decorators")


def deferred(func: Callable[P, T]) -> Callable[P, Result[T]]:
    """Wrap ``func`` so each call returns ``Result.of`` over that call.

    The call itself is deferred until the returned result is forced.
    """
    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
        logger.debug("Deferring call to %s", func.__qualname__)
        return Result.of(lambda: func(*args, **kwargs))

    return wrapper


def sneaky(
    *checked: type[BaseException],
) -> Callable[[Callable[P, T]], Callable[P, Result[T]]]:
    """Like :func:`deferred`, but built on ``Result.of_sneaky_throws``.

    Errors of the ``checked`` kinds (``CheckedError`` when none are given)
    are wrapped into ``SneakyThrowError``.

    Example:
        >>> @sneaky(OSError)
        ... def read(path: str) -> str:
        ...     with open(path) as fh:
        ...         return fh.read()
    """
    kinds: ErrorKinds = checked or CheckedError

    def decorator(func: Callable[P, T]) -> Callable[P, Result[T]]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Result[T]:
            logger.debug("Deferring call to %s", func.__qualname__)
            return Result.of_sneaky_throws(lambda: func(*args, **kwargs), checked=kinds)

        return wrapper

    return decorator
