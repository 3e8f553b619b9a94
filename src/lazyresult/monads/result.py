"""Deferred, memoizing Result for exception-free error handling.

A ``Result[T]`` wraps a zero-argument computation that either produces a ``T``
or raises. Nothing runs until the result is *forced*; a successful outcome is
cached forever, a failed one is not (the next forcing runs the computation
again). ``Success`` and ``Failure`` are the realized variants and can be
built directly.

Combinators are defined once on ``Result`` and never force anything when
called; each returns a new deferred ``Result`` whose forcing drives the chain:
- Functor: map, as_
- Monad: flat_map
- Error channel: map_error, catch_all, catch_some
- Side effects: tap, tap_error
- Extraction (forcing): unsafe_get, or_else, or_else_get, or_else_raise, to_optional

Example:
    >>> result = Result.of(lambda: int("41")).map(lambda x: x + 1)
    >>> result.unsafe_get()
    42

    >>> Result.of(lambda: int("nope")).map(lambda x: x + 1).or_else(0)
    0

    Pattern matching on the realized outcome:
    >>> match Result.of(lambda: 1 / 0).force():
    ...     case Success(value):
    ...         print(value)
    ...     case Failure(error):
    ...         print(type(error).__name__)
    ZeroDivisionError

Notes:
    - Equality and hashing FORCE both operands (see ``same_outcome``).
    - ``repr`` never forces.
    - Only ``Exception`` subclasses are captured; ``KeyboardInterrupt`` and
      friends propagate out of the forcing call.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Generic, NoReturn, TypeAlias, TypeVar, cast

from lazyresult.errors import (
    NONE_VALUE_MESSAGE,
    NOT_PRESENT_MESSAGE,
    TAP_ERROR_MESSAGE,
    CheckedError,
    ErrorInfo,
    ResultContractError,
    SneakyThrowError,
    TapError,
    ValueNotPresentError,
    add_suppressed,
)
from lazyresult.foundation.config import get_settings

from .cell import OnceCell

T = TypeVar("T")  # Success type
U = TypeVar("U")  # Mapped success type

logger = logging.getLogger("lazyresult.result")

ErrorKinds: TypeAlias = "type[BaseException] | tuple[type[BaseException], ...]"
Handler: TypeAlias = "Result[T] | Callable[[BaseException], Result[T]] | Callable[[], Result[T]]"
Step: TypeAlias = "Callable[[Success[Any] | Failure[Any]], Result[Any]]"

# Error kinds wrapped into SneakyThrowError by plain construction and map
_DECLARED: tuple[type[BaseException], ...] = (CheckedError,)


class Result(Generic[T]):
    """Deferred computation producing either a value or an error.

    ``Result(thunk)`` is the same as ``Result.of(thunk)``.

    Forcing runs the computation at most once per *successful* outcome. A
    failing computation is rerun on every forcing, because failures are never
    memoized; callers that want a stable failure should force once and keep
    the returned ``Failure``.

    Memoization is plain state unless ``LAZYRESULT_MEMO_THREAD_SAFE`` is set,
    in which case the evaluated transition is guarded by a lock.
    """

    __slots__ = ("_resolve", "_source", "_step", "_cell")

    def __init__(self, thunk: Callable[[], T]) -> None:
        self._init_deferred(_capture(_require_callable(thunk), checked=_DECLARED))

    def _init_deferred(
        self,
        resolve: Callable[[], Success[T] | Failure[T]] | None = None,
        source: Result[Any] | None = None,
        step: Step | None = None,
    ) -> None:
        self._resolve = resolve
        self._source = source
        self._step = step
        self._cell: OnceCell[Success[T] | Failure[T]] = OnceCell(thread_safe=get_settings().memo.thread_safe)

    @staticmethod
    def _deferred(resolve: Callable[[], Success[U] | Failure[U]]) -> Result[U]:
        """Build a deferred result from a resolver returning a realized outcome."""
        result: Result[U] = Result.__new__(Result)
        result._init_deferred(resolve)
        return result

    def _then(self, step: Step) -> Result[Any]:
        """Deferred result whose outcome is ``step`` applied to this one's outcome.

        ``step`` returns a realized outcome or another Result still to force.
        """
        result: Result[Any] = Result.__new__(Result)
        result._init_deferred(source=self, step=step)
        return result

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @staticmethod
    def of(computation: Callable[[], T]) -> Result[T]:
        """Defer ``computation``; an Exception it raises becomes a Failure.

        A ``CheckedError`` is wrapped as in ``of_sneaky_throws``. A computation
        returning None fails with ``ResultContractError``; use ``of_effect``
        for effect-only callables.
        """
        return Result._deferred(_capture(_require_callable(computation), checked=_DECLARED))

    @staticmethod
    def of_effect(effect: Callable[[], object]) -> Result[None]:
        """Defer an effect-only callable; succeeds with the void marker."""
        return Result._deferred(_capture(_require_callable(effect), void=True, checked=_DECLARED))

    @staticmethod
    def of_sneaky_throws(
        computation: Callable[[], T],
        checked: ErrorKinds = CheckedError,
    ) -> Result[T]:
        """Like ``of``, but declared (checked) errors are wrapped.

        An error that is an instance of ``checked`` fails the result with a
        ``SneakyThrowError`` whose ``__cause__`` is the original. Any other
        error is carried unchanged.

        Example:
            >>> r = Result.of_sneaky_throws(lambda: open("/missing").read(), checked=OSError)
            >>> type(r.err()).__name__, type(r.err().__cause__).__name__
            ('SneakyThrowError', 'FileNotFoundError')
        """
        return Result._deferred(_capture(_require_callable(computation), checked=_require_kinds(checked)))

    @staticmethod
    def success(value: T) -> Success[T]:
        return Success(value)

    @staticmethod
    def failure(error: BaseException) -> Failure[T]:
        return Failure(error)

    @staticmethod
    def unit() -> Success[None]:
        """The void success, for computations with no meaningful value."""
        return Success.void()

    @staticmethod
    def from_optional(value: T | None) -> Result[T]:
        """Success for a present value, Failure(ValueNotPresentError) for None."""
        if value is None:
            return Failure(ValueNotPresentError(NOT_PRESENT_MESSAGE))
        return Success(value)

    # ─────────────────────────────────────────────────────────────────
    # Forcing
    # ─────────────────────────────────────────────────────────────────

    def force(self) -> Success[T] | Failure[T]:
        """Run the computation if needed and return the realized outcome.

        Never raises for a captured error; see ``unsafe_get`` for that. Chains
        of any length are forced with an explicit stack, not recursion.
        """
        return _run(self)

    def _settled(self) -> Success[T] | Failure[T] | None:
        """The outcome if already known without running anything."""
        return self._cell.peek() if self._cell.is_set else None

    def _settle(self, outcome: Success[T] | Failure[T]) -> Success[T] | Failure[T]:
        """Publish ``outcome`` (successes only) and release the cell lock."""
        try:
            if isinstance(outcome, Failure):
                logger.debug("Deferred computation failed, not memoized: %s: %s",
                             type(outcome.error).__name__, outcome.error)
            else:
                logger.debug("Deferred computation succeeded, value memoized")
            return self._cell.publish(outcome, _is_success)
        finally:
            self._cell.release()

    @property
    def is_evaluated(self) -> bool:
        """Whether a success has been memoized. Does not force."""
        return self._cell.is_set

    def unsafe_get(self) -> T:
        """Force and return the value, raising the carried error on failure.

        This is the one place where a failure turns back into a raised
        exception. The void success returns None.
        """
        outcome = self.force()
        if isinstance(outcome, Failure):
            raise outcome.error
        return outcome.value

    def is_success(self) -> bool:
        return isinstance(self.force(), Success)

    def is_failure(self) -> bool:
        return isinstance(self.force(), Failure)

    def err(self) -> BaseException | None:
        """The carried error, or None on success. Forces."""
        outcome = self.force()
        return outcome.error if isinstance(outcome, Failure) else None

    def describe(self) -> ErrorInfo | None:
        """Structured causal chain of the carried error, or None on success. Forces."""
        error = self.err()
        return ErrorInfo.from_exception(error) if error is not None else None

    def match(
        self,
        *,
        success: Callable[[T], U],
        failure: Callable[[BaseException], U],
    ) -> U:
        """Fold both variants into one value. Forces.

        Example:
            >>> Success(2).match(success=lambda x: x * 10, failure=lambda e: -1)
            20
        """
        outcome = self.force()
        if isinstance(outcome, Failure):
            return failure(outcome.error)
        return success(outcome.value)

    # ─────────────────────────────────────────────────────────────────
    # Transformation
    # ─────────────────────────────────────────────────────────────────

    def flat_map(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Chain a Result-returning step (monadic bind).

        Failures short-circuit: ``f`` is not called. If ``f`` raises, the
        outcome is a Failure carrying that error; if it does not return a
        Result, the outcome is a Failure(ResultContractError).
        """
        def step(outcome: Success[T] | Failure[T]) -> Result[U]:
            if isinstance(outcome, Failure):
                return cast("Failure[U]", outcome)
            try:
                following = f(outcome.value)
            except Exception as exc:
                return Failure(exc)
            if not isinstance(following, Result):
                return Failure(ResultContractError(
                    f"flat_map mapper must return a Result, got {type(following).__name__}"
                ))
            return following

        return self._then(step)

    def and_then(self, f: Callable[[T], Result[U]]) -> Result[U]:
        """Alias for flat_map."""
        return self.flat_map(f)

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Apply ``f`` to a successful value; an error raised by ``f`` becomes the failure.

        ``f`` returning None fails with ``ResultContractError``.
        """
        def step(outcome: Success[T] | Failure[T]) -> Result[U]:
            if isinstance(outcome, Failure):
                return cast("Failure[U]", outcome)
            value = outcome.value
            return _capture(lambda: f(value), checked=_DECLARED)()

        return self._then(step)

    def as_(self, value: U) -> Result[U]:
        """Replace a successful value with ``value``; failures pass through."""
        return self.map(lambda _: value)

    def map_error(self, f: Callable[[BaseException], BaseException]) -> Result[T]:
        """Transform the carried error; successes pass through untouched.

        If ``f`` raises, the raised error replaces the original.
        """
        def step(outcome: Success[T] | Failure[T]) -> Result[T]:
            if isinstance(outcome, Success):
                return outcome
            try:
                mapped = f(outcome.error)
            except Exception as exc:
                return Failure(exc)
            if not isinstance(mapped, BaseException):
                return Failure(ResultContractError(
                    f"map_error mapper must return an exception, got {type(mapped).__name__}"
                ))
            return Failure(mapped)

        return self._then(step)

    # ─────────────────────────────────────────────────────────────────
    # Side effects
    # ─────────────────────────────────────────────────────────────────

    def tap(self, callback: Callable[[T], object]) -> Result[T]:
        """Run ``callback`` on a successful value and pass the value through.

        If the callback raises, the result fails with the callback's error,
        which gets a ``TapError`` marker attached as a suppressed cause.
        Failures are passed through without calling ``callback``.
        """
        def step(outcome: Success[T] | Failure[T]) -> Result[T]:
            if isinstance(outcome, Failure):
                return outcome
            try:
                callback(outcome.value)
            except Exception as exc:
                logger.warning("tap callback raised %s: %s", type(exc).__name__, exc)
                add_suppressed(exc, TapError(TAP_ERROR_MESSAGE))
                return Failure(exc)
            return outcome

        return self._then(step)

    def tap_error(self, callback: Callable[[BaseException], object]) -> Result[T]:
        """Run ``callback`` on the carried error, leaving the failure unchanged.

        An error raised by the callback is attached to the original error as
        a suppressed cause. Successes are passed through without calling it.
        """
        def step(outcome: Success[T] | Failure[T]) -> Result[T]:
            if isinstance(outcome, Success):
                return outcome
            try:
                callback(outcome.error)
            except Exception as exc:
                logger.warning("tap_error callback raised %s: %s", type(exc).__name__, exc)
                add_suppressed(outcome.error, exc)
            return outcome

        return self._then(step)

    # ─────────────────────────────────────────────────────────────────
    # Recovery
    # ─────────────────────────────────────────────────────────────────

    def catch_all(self, handler: Handler[T]) -> Result[T]:
        """Replace any failure with the handler's result.

        ``handler`` is a fallback Result, a callable taking the error, or a
        zero-argument callable. It is only evaluated when this result fails.

        Example:
            >>> Failure(ValueError("x")).catch_all(lambda e: Success(str(e))).unsafe_get()
            'x'
        """
        recover = _as_handler(handler, "catch_all")

        def step(outcome: Success[T] | Failure[T]) -> Result[T]:
            if isinstance(outcome, Success):
                return outcome
            return _recover(outcome, recover)

        return self._then(step)

    def catch_some(self, kind: ErrorKinds, handler: Handler[T]) -> Result[T]:
        """Like ``catch_all``, but only for errors that are instances of ``kind``.

        Any other failure propagates unchanged and the handler is not called.
        """
        kinds = _require_kinds(kind)
        recover = _as_handler(handler, "catch_some")

        def step(outcome: Success[T] | Failure[T]) -> Result[T]:
            if isinstance(outcome, Success) or not isinstance(outcome.error, kinds):
                return outcome
            return _recover(outcome, recover)

        return self._then(step)

    # ─────────────────────────────────────────────────────────────────
    # Extraction
    # ─────────────────────────────────────────────────────────────────

    def or_else(self, default: T) -> T:
        """The value, or ``default`` on failure."""
        outcome = self.force()
        return default if isinstance(outcome, Failure) else outcome.value

    def or_else_get(self, supplier: Callable[[], T]) -> T:
        """The value, or ``supplier()`` on failure.

        If the supplier raises, the ORIGINAL error is raised, with the
        supplier's error attached as a suppressed cause.
        """
        outcome = self.force()
        if isinstance(outcome, Success):
            return outcome.value
        error = outcome.error
        try:
            return supplier()
        except Exception as exc:
            logger.warning("or_else_get supplier raised %s: %s", type(exc).__name__, exc)
            add_suppressed(error, exc)
        raise error

    def or_else_raise(
        self,
        replacement: BaseException | Callable[[BaseException], BaseException] | None = None,
    ) -> T:
        """The value, or raise on failure.

        - no argument: raise the carried error
        - an exception: raise it, with the carried error attached as suppressed
        - a callable: raise ``replacement(error)``
        """
        outcome = self.force()
        if isinstance(outcome, Success):
            return outcome.value
        original = outcome.error
        if replacement is None:
            raise original
        if isinstance(replacement, BaseException):
            add_suppressed(replacement, original)
            raise replacement
        if callable(replacement):
            mapped = replacement(original)
            if not isinstance(mapped, BaseException):
                raise ResultContractError(
                    f"or_else_raise mapper must return an exception, got {type(mapped).__name__}"
                ) from original
            raise mapped
        raise ResultContractError(
            f"or_else_raise expects an exception or a callable, got {type(replacement).__name__}"
        ) from original

    def to_optional(self) -> T | None:
        """The value, or None on failure (the error is discarded). Forces."""
        outcome = self.force()
        return None if isinstance(outcome, Failure) else outcome.value

    # ─────────────────────────────────────────────────────────────────
    # Equality (evaluation-triggering)
    # ─────────────────────────────────────────────────────────────────

    def same_outcome(self, other: Result[object]) -> bool:
        """Structural comparison of outcomes. FORCES BOTH RESULTS.

        Two successes are equal when their values are equal (two void
        successes are equal). Two failures are equal when their errors have
        the same concrete type and the same message, even if they are
        distinct instances. A success never equals a failure.

        ``==`` and ``hash()`` delegate here, so comparing or hashing a
        deferred result runs its computation.
        """
        mine, theirs = self.force(), other.force()
        if isinstance(mine, Success) and isinstance(theirs, Success):
            if mine.is_void or theirs.is_void:
                return mine.is_void and theirs.is_void
            return bool(mine.value == theirs.value)
        if isinstance(mine, Failure) and isinstance(theirs, Failure):
            return _error_key(mine.error) == _error_key(theirs.error)
        return False

    def __eq__(self, other: object) -> bool:
        """Forces both operands; see ``same_outcome``."""
        if not isinstance(other, Result):
            return NotImplemented
        return self.same_outcome(other)

    def __hash__(self) -> int:
        """Forces; hashes the outcome the way ``same_outcome`` compares it."""
        outcome = self.force()
        if isinstance(outcome, Failure):
            return hash((False, *_error_key(outcome.error)))
        return hash((True, outcome.is_void, outcome.value))

    def __repr__(self) -> str:
        if not self._cell.is_set:
            return "Result(<deferred>)"
        return f"Result(<evaluated: {self._cell.peek()!r}>)"

    def __str__(self) -> str:
        return repr(self)


class Success(Result[T]):
    """Realized success carrying a non-None value, or the void marker."""

    __slots__ = ("_value", "_void")
    __match_args__ = ("value",)

    def __init__(self, value: T) -> None:
        if value is None:
            raise ResultContractError(f"{NONE_VALUE_MESSAGE}; use Success.void()")
        self._value = value
        self._void = False

    @classmethod
    def void(cls) -> Success[None]:
        """Success for effect-only computations; its value is None."""
        inst = cast("Success[None]", cls.__new__(cls))
        inst._value = None
        inst._void = True
        return inst

    @property
    def value(self) -> T:
        return self._value

    @property
    def is_void(self) -> bool:
        return self._void

    def force(self) -> Success[T]:
        return self

    def _settled(self) -> Success[T]:
        return self

    @property
    def is_evaluated(self) -> bool:
        return True

    def __repr__(self) -> str:
        return "Success(<void>)" if self._void else f"Success({self._value!r})"


class Failure(Result[T]):
    """Realized failure carrying an exception."""

    __slots__ = ("_error",)
    __match_args__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        if not isinstance(error, BaseException):
            raise ResultContractError(
                f"Failure must hold an exception, got {type(error).__name__}"
            )
        self._error = error

    @property
    def error(self) -> BaseException:
        return self._error

    def force(self) -> Failure[T]:
        return self

    def _settled(self) -> Failure[T]:
        return self

    @property
    def is_evaluated(self) -> bool:
        return True

    def raise_error(self) -> NoReturn:
        raise self._error

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"


# ═════════════════════════════════════════════════════════════════════════════
# Helpers
# ═════════════════════════════════════════════════════════════════════════════


def _is_success(outcome: Success[T] | Failure[T]) -> bool:
    return isinstance(outcome, Success)


def _error_key(error: BaseException) -> tuple[type[BaseException], str]:
    return type(error), str(error)


def _require_callable(fn: object) -> Callable[[], T]:
    if fn is None:
        raise ResultContractError("Result cannot hold a null thunk")
    if not callable(fn):
        raise ResultContractError(f"Result thunk must be callable, got {type(fn).__name__}")
    return cast("Callable[[], T]", fn)


def _require_kinds(kind: object) -> tuple[type[BaseException], ...]:
    kinds = kind if isinstance(kind, tuple) else (kind,)
    if not kinds or not all(isinstance(k, type) and issubclass(k, BaseException) for k in kinds):
        raise ResultContractError(f"Expected an exception type or a tuple of them, got {kind!r}")
    return cast("tuple[type[BaseException], ...]", kinds)


def _capture(
    thunk: Callable[[], T],
    *,
    void: bool = False,
    checked: tuple[type[BaseException], ...] = (),
) -> Callable[[], Success[T] | Failure[T]]:
    """Adapt a raising thunk into a resolver returning the realized outcome."""
    def resolve() -> Success[T] | Failure[T]:
        try:
            value = thunk()
        except Exception as exc:
            if checked and isinstance(exc, checked):
                return Failure(SneakyThrowError.wrap(exc))
            return Failure(exc)
        if void:
            return cast("Success[T]", Success.void())
        if value is None:
            return Failure(ResultContractError(NONE_VALUE_MESSAGE))
        return Success(value)

    return resolve


def _takes_no_args(fn: Callable[..., object]) -> bool:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD,
                  inspect.Parameter.VAR_POSITIONAL)
    return not any(p.kind in positional for p in params)


def _as_handler(handler: object, operation: str) -> Callable[[BaseException], object]:
    if isinstance(handler, Result):
        fallback = handler
        return lambda _error: fallback
    if not callable(handler):
        raise ResultContractError(
            f"{operation} handler must be a Result or a callable, got {type(handler).__name__}"
        )
    if _takes_no_args(handler):
        return lambda _error: handler()
    return handler


def _recover(failure: Failure[T], recover: Callable[[BaseException], object]) -> Result[T]:
    try:
        replacement = recover(failure.error)
    except Exception as exc:
        add_suppressed(exc, failure.error)
        return Failure(exc)
    if not isinstance(replacement, Result):
        return Failure(ResultContractError(
            f"Recovery handler must return a Result, got {type(replacement).__name__}"
        ))
    return cast("Result[T]", replacement)


def _run(target: Result[T]) -> Success[T] | Failure[T]:
    """Force ``target`` without recursing down its chain.

    ``waiting`` holds the deferred results whose outcome depends on the one
    being forced, innermost last, each with its cell lock held. An entry
    flagged ready settles with the next outcome delivered to it; otherwise
    its step is applied first, and may hand back another Result to force.
    """
    waiting: list[tuple[Result[Any], bool]] = []
    current: Result[Any] = target
    try:
        while True:
            outcome = current._settled()
            if outcome is None:
                current._cell.acquire()
                outcome = current._settled()
                if outcome is not None:
                    current._cell.release()
                elif current._source is not None:
                    waiting.append((current, False))
                    current = current._source
                    continue
                else:
                    waiting.append((current, True))
                    outcome = current._resolve()

            while waiting:
                node, ready = waiting[-1]
                if not ready:
                    following = node._step(outcome)
                    outcome = following._settled()
                    if outcome is None:
                        waiting[-1] = (node, True)
                        current = following
                        break
                waiting.pop()
                outcome = node._settle(outcome)
            else:
                return outcome
    finally:
        while waiting:
            waiting.pop()[0]._cell.release()
