"""Deferred, memoizing Result monad.

Provides a lazy Result type for exception-free error propagation with:
- Single-shot memoization of successes (failures are recomputed)
- Functor/Monad combinators that never force at construction
- Selective and total recovery, side-effect hooks with suppressed causes
- Structural, evaluation-triggering equality

Example:
    >>> from lazyresult.monads import Result, Success
    >>>
    >>> result = (
    ...     Result.of(lambda: 10 / 2)
    ...     .map(lambda x: x * 2)
    ...     .flat_map(lambda x: Success(x + 1))
    ... )
    >>> assert result.unsafe_get() == 11.0
"""

from .cell import CellState, OnceCell
from .collections import sequence, traverse
from .decorators import deferred, sneaky
from .result import Failure, Result, Success

__all__ = [
    # Core types
    "Result",
    "Success",
    "Failure",
    # Memoization
    "OnceCell",
    "CellState",
    # Decorators
    "deferred",
    "sneaky",
    # Collection operations
    "sequence",
    "traverse",
]
