"""Single-shot memoization cell for deferred results.

The cell only ever records a success. A failed evaluation leaves it
unevaluated, so the next forcing runs the computation again.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class CellState(Enum):
    UNEVALUATED = "unevaluated"
    EVALUATED = "evaluated"


class OnceCell(Generic[T]):
    """Holds a value published at most once.

    ``get_or_compute`` calls ``compute`` and keeps its return value only when
    ``accept`` approves it. With ``thread_safe`` the publication is guarded by
    a lock (double-checked), so concurrent callers observe a single value;
    without it the cell is plain state for single-threaded use.

    Result forcing drives ``acquire``, ``publish`` and ``release`` directly so
    it can hold the locks of a whole chain without recursing.
    """

    __slots__ = ("_state", "_value", "_lock")

    def __init__(self, *, thread_safe: bool = False) -> None:
        self._state = CellState.UNEVALUATED
        self._value: T | None = None
        self._lock = threading.RLock() if thread_safe else None

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def is_set(self) -> bool:
        return self._state is CellState.EVALUATED

    @property
    def thread_safe(self) -> bool:
        return self._lock is not None

    def peek(self) -> T | None:
        """Current value without computing (None while unevaluated)."""
        return self._value

    def acquire(self) -> None:
        """Take the publication lock; a no-op for an unlocked cell."""
        if self._lock is not None:
            self._lock.acquire()

    def release(self) -> None:
        if self._lock is not None:
            self._lock.release()

    def publish(self, value: T, accept: Callable[[T], bool]) -> T:
        """Record ``value`` if ``accept`` approves it; an already published value wins.

        Callers of a thread-safe cell hold the lock (see ``acquire``).
        """
        if self._state is CellState.EVALUATED:
            return self._value  # type: ignore[return-value]
        if accept(value):
            self._value = value
            self._state = CellState.EVALUATED
        return value

    def get_or_compute(self, compute: Callable[[], T], accept: Callable[[T], bool]) -> T:
        if self._state is CellState.EVALUATED:
            return self._value  # type: ignore[return-value]
        self.acquire()
        try:
            if self._state is CellState.EVALUATED:
                return self._value  # type: ignore[return-value]
            return self.publish(compute(), accept)
        finally:
            self.release()
