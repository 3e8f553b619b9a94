"""Collection operations over deferred results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, TypeVar, cast

from lazyresult.errors import ResultContractError

from .result import Failure, Result, Success

if TYPE_CHECKING:
    from collections.abc import Iterable

T = TypeVar("T")
U = TypeVar("U")


def sequence(results: Iterable[Result[T]]) -> Result[list[T]]:
    """Convert results into a deferred Result of their values.

    Fails with the first failure in order; results after it are not forced.

    Example:
        >>> sequence([Success(1), Success(2)]).unsafe_get()
        [1, 2]
        >>> sequence([Success(1), Failure(KeyError("k"))]).err()
        KeyError('k')
    """
    items = list(results)

    def resolve() -> Success[list[T]] | Failure[list[T]]:
        values: list[T] = []
        for result in items:
            outcome = result.force()
            if isinstance(outcome, Failure):
                return cast("Failure[list[T]]", outcome)
            values.append(outcome.value)
        return Success(values)

    return Result._deferred(resolve)


def traverse(items: Iterable[T], f: Callable[[T], Result[U]]) -> Result[list[U]]:
    """Apply a Result-returning ``f`` to every item and sequence the results.

    ``f`` is applied lazily, item by item, and not past the first failure.

    Example:
        >>> traverse(["1", "2"], lambda s: Result.of(lambda: int(s))).unsafe_get()
        [1, 2]
    """
    pending = list(items)

    def resolve() -> Success[list[U]] | Failure[list[U]]:
        values: list[U] = []
        for item in pending:
            try:
                result = f(item)
            except Exception as exc:
                return Failure(exc)
            if not isinstance(result, Result):
                return Failure(ResultContractError(
                    f"traverse function must return a Result, got {type(result).__name__}"
                ))
            outcome = result.force()
            if isinstance(outcome, Failure):
                return cast("Failure[list[U]]", outcome)
            values.append(outcome.value)
        return Success(values)

    return Result._deferred(resolve)
