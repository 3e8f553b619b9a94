"""Tests for the deferred Result monad.

Validates:
- Monad laws over success and failure chains
- Failure absorption
- Construction contracts
- Transformation combinators
- Structural (forcing) equality
"""

from __future__ import annotations

from typing import Callable

import pytest
from hypothesis import given
from hypothesis import strategies as st

from lazyresult import (
    CheckedError,
    Failure,
    Result,
    ResultContractError,
    SneakyThrowError,
    Success,
    ValueNotPresentError,
)
from lazyresult.errors import NONE_VALUE_MESSAGE, NOT_PRESENT_MESSAGE, SNEAKY_THROW_MESSAGE


def _boom(_: int) -> Result[int]:
    return Failure(RuntimeError("error"))


MAPPERS: list[Callable[[int], Result[int]]] = [
    lambda i: Success(i + 1),
    lambda i: Result.of(lambda: i * 2),
    _boom,
]

mappers = st.sampled_from(MAPPERS)
results = st.one_of(
    st.integers().map(Success),
    st.just(None).map(lambda _: Failure(RuntimeError("error"))),
    st.integers().map(lambda i: Result.of(lambda: i)),
)


# ═════════════════════════════════════════════════════════════════════════════
# Property Tests - Monad Laws
# ═════════════════════════════════════════════════════════════════════════════


@given(value=st.integers(), f=mappers)
def test_left_identity(value: int, f: Callable[[int], Result[int]]) -> None:
    """Monad law: success(v).flat_map(f) == f(v)"""
    assert Success(value).flat_map(f) == f(value)


@given(m=results)
def test_right_identity(m: Result[int]) -> None:
    """Monad law: m.flat_map(success) == m"""
    assert m.flat_map(Success) == m


@given(m=results, f=mappers, g=mappers)
def test_associativity(m: Result[int], f: Callable[[int], Result[int]], g: Callable[[int], Result[int]]) -> None:
    """Monad law: m.flat_map(f).flat_map(g) == m.flat_map(lambda x: f(x).flat_map(g))"""
    assert m.flat_map(f).flat_map(g) == m.flat_map(lambda x: f(x).flat_map(g))


@given(message=st.text())
def test_failure_absorbs_flat_map(message: str) -> None:
    """Failure absorption: a failing m is returned unchanged and f never runs."""
    calls = 0

    def f(x: int) -> Result[int]:
        nonlocal calls
        calls += 1
        return Success(x)

    m: Result[int] = Failure(ValueError(message))
    assert m.flat_map(f) == m
    assert calls == 0


def test_functor_identity() -> None:
    """Functor law: map(id) == id"""
    assert Success(42).map(lambda x: x) == Success(42)
    assert Failure(KeyError("k")).map(lambda x: x) == Failure(KeyError("k"))


def test_functor_composition() -> None:
    """Functor law: map(f . g) == map(g).map(f)"""
    f: Callable[[int], int] = lambda x: x + 1
    g: Callable[[int], int] = lambda x: x * 2

    assert Success(5).map(lambda x: f(g(x))) == Success(5).map(g).map(f)


# ═════════════════════════════════════════════════════════════════════════════
# Construction
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("factory", [Result.of, Result.of_effect, Result.of_sneaky_throws, Result])
def test_null_thunk_rejected_at_construction(factory: Callable[[object], Result[object]]) -> None:
    with pytest.raises(ResultContractError, match="null thunk"):
        factory(None)


def test_non_callable_thunk_rejected() -> None:
    with pytest.raises(ResultContractError):
        Result.of(42)  # type: ignore[arg-type]


def test_success_rejects_none() -> None:
    with pytest.raises(ResultContractError):
        Success(None)


def test_failure_rejects_none() -> None:
    with pytest.raises(ResultContractError):
        Failure(None)  # type: ignore[arg-type]


def test_result_constructor_is_of() -> None:
    assert Result(lambda: 7) == Result.of(lambda: 7)


def test_of_captures_exception() -> None:
    result = Result.of(lambda: 1 // 0)

    assert result.is_failure()
    assert isinstance(result.err(), ZeroDivisionError)
    with pytest.raises(ZeroDivisionError):
        result.unsafe_get()


def test_of_returning_none_fails_with_contract_error() -> None:
    lookup: dict[str, int] = {}
    result = Result.of(lambda: lookup.get("missing"))

    assert result.is_failure()
    assert isinstance(result.err(), ResultContractError)
    assert str(result.err()) == NONE_VALUE_MESSAGE
    assert result.to_optional() is None
    assert Result.from_optional(result.to_optional()).is_failure()


def test_map_and_flat_map_to_none_fail() -> None:
    assert isinstance(Success(1).map(lambda _: None).err(), ResultContractError)
    assert isinstance(Success(1).as_(None).err(), ResultContractError)
    assert isinstance(Success(1).flat_map(lambda _: None).err(), ResultContractError)  # type: ignore[arg-type, return-value]


def test_of_wraps_checked_errors() -> None:
    class Declared(CheckedError):
        pass

    def raise_declared() -> int:
        raise Declared("quota")

    error = Result.of(raise_declared).err()
    mapped = Success(1).map(lambda _: raise_declared()).err()

    assert isinstance(error, SneakyThrowError)
    assert isinstance(error.__cause__, Declared)
    assert isinstance(mapped, SneakyThrowError)
    assert isinstance(Result.of(lambda: int("x")).err(), ValueError)


def test_of_effect_discards_return_value(counter) -> None:
    result = Result.of_effect(counter)

    assert result.force() == Success.void()
    assert result.force().is_void
    assert counter.calls == 1


def test_void_successes_are_equal_but_differ_from_values() -> None:
    assert Success.void() == Result.unit()
    assert Success.void() != Success(0)
    assert Success(0) != Success.void()


def test_success_and_failure_helpers() -> None:
    assert Result.success(1) == Success(1)
    assert Result.failure(KeyError("k")) == Failure(KeyError("k"))


def test_base_exceptions_are_not_captured() -> None:
    def interrupt() -> int:
        raise KeyboardInterrupt

    result = Result.of(interrupt)
    with pytest.raises(KeyboardInterrupt):
        result.force()


def test_of_sneaky_throws_wraps_declared_errors() -> None:
    class Declared(CheckedError):
        pass

    original = Declared("disk full")

    def raise_declared() -> int:
        raise original

    result = Result.of_sneaky_throws(raise_declared)
    error = result.err()

    assert isinstance(error, SneakyThrowError)
    assert isinstance(error, RuntimeError)
    assert str(error) == SNEAKY_THROW_MESSAGE
    assert error.__cause__ is original
    with pytest.raises(SneakyThrowError) as exc:
        result.unsafe_get()
    assert exc.value.__cause__ is original


def test_of_sneaky_throws_with_explicit_kinds() -> None:
    def read() -> str:
        raise FileNotFoundError("missing.txt")

    error = Result.of_sneaky_throws(read, checked=(OSError,)).err()

    assert isinstance(error, SneakyThrowError)
    assert isinstance(error.__cause__, FileNotFoundError)


def test_of_sneaky_throws_keeps_undeclared_errors() -> None:
    def fail() -> int:
        raise ValueError("plain")

    error = Result.of_sneaky_throws(fail).err()

    assert isinstance(error, ValueError)
    assert str(error) == "plain"


def test_of_sneaky_throws_rejects_bad_kinds() -> None:
    with pytest.raises(ResultContractError):
        Result.of_sneaky_throws(lambda: 1, checked="OSError")  # type: ignore[arg-type]


def test_of_sneaky_throws_success() -> None:
    assert Result.of_sneaky_throws(lambda: 3).unsafe_get() == 3


def test_from_optional() -> None:
    assert Result.from_optional(5) == Success(5)

    absent = Result.from_optional(None)
    assert absent.is_failure()
    assert isinstance(absent.err(), ValueNotPresentError)
    assert str(absent.err()) == NOT_PRESENT_MESSAGE


@given(m=results)
def test_from_optional_round_trips_success_state(m: Result[int]) -> None:
    restored = Result.from_optional(m.to_optional())

    assert restored.is_success() == m.is_success()
    if m.is_success():
        assert restored.unsafe_get() == m.unsafe_get()


# ═════════════════════════════════════════════════════════════════════════════
# Transformation
# ═════════════════════════════════════════════════════════════════════════════


def test_map_success() -> None:
    assert Success(42).map(lambda x: x + 1) == Success(43)


def test_map_failure_skips_function(counter) -> None:
    mapped = Failure(RuntimeError("boom")).map(counter)

    assert mapped.is_failure()
    assert type(mapped.err()) is RuntimeError
    assert str(mapped.err()) == "boom"
    assert counter.calls == 0


def test_map_function_raising_becomes_failure() -> None:
    mapped = Success("x").map(int)

    assert isinstance(mapped.err(), ValueError)


def test_flat_map_success_to_failure() -> None:
    chained = Success(5).flat_map(lambda _: Failure(KeyError("missing")))

    assert chained == Failure(KeyError("missing"))


def test_flat_map_mapper_raising_becomes_failure() -> None:
    def explode(_: int) -> Result[int]:
        raise LookupError("nope")

    assert Success(1).flat_map(explode) == Failure(LookupError("nope"))


@pytest.mark.parametrize("bad", [None, 5, "text"])
def test_flat_map_non_result_is_contract_failure(bad: object) -> None:
    chained = Success(1).flat_map(lambda _: bad)  # type: ignore[arg-type, return-value]

    assert isinstance(chained.err(), ResultContractError)


def test_and_then_alias() -> None:
    assert Success(5).and_then(lambda x: Success(x * 2)) == Success(5).flat_map(lambda x: Success(x * 2))


def test_map_error_transforms_failure() -> None:
    result = Failure(RuntimeError("error")).map_error(lambda e: ValueError(f"mapped: {e}"))

    assert result == Failure(ValueError("mapped: error"))


def test_map_error_leaves_success(counter) -> None:
    assert Success(42).map_error(counter) == Success(42)
    assert counter.calls == 0


def test_map_error_mapper_raising_replaces_error() -> None:
    def explode(_: BaseException) -> BaseException:
        raise TypeError("mapper broke")

    assert Failure(KeyError("k")).map_error(explode) == Failure(TypeError("mapper broke"))


def test_map_error_non_exception_is_contract_failure() -> None:
    result = Failure(KeyError("k")).map_error(lambda _: "not an error")  # type: ignore[arg-type, return-value]

    assert isinstance(result.err(), ResultContractError)


@given(m=results, replacement=st.text())
def test_as_replaces_value(m: Result[int], replacement: str) -> None:
    mapped = m.as_(replacement)

    assert mapped.is_success() == m.is_success()
    if m.is_success():
        assert mapped.unsafe_get() == replacement


def test_match() -> None:
    assert Success(42).match(success=lambda x: f"ok {x}", failure=lambda e: f"failed {e}") == "ok 42"
    assert Failure(KeyError("k")).match(success=lambda x: x, failure=lambda e: type(e).__name__) == "KeyError"


def test_pattern_matching_on_forced_outcome() -> None:
    match Result.of(lambda: 1 / 0).force():
        case Success(value):
            outcome = f"value {value}"
        case Failure(error):
            outcome = type(error).__name__

    assert outcome == "ZeroDivisionError"


def test_describe() -> None:
    assert Success(1).describe() is None

    info = Failure(KeyError("k")).describe()
    assert info is not None
    assert info.kind == "KeyError"


# ═════════════════════════════════════════════════════════════════════════════
# Structural Equality
# ═════════════════════════════════════════════════════════════════════════════


def test_distinct_failures_with_same_kind_and_message_are_equal() -> None:
    first, second = Failure(RuntimeError("x")), Failure(RuntimeError("x"))

    assert first.err() is not second.err()
    assert first == second
    assert hash(first) == hash(second)


def test_failures_differ_by_kind_or_message() -> None:
    assert Failure(RuntimeError("x")) != Failure(RuntimeError("y"))
    assert Failure(RuntimeError("x")) != Failure(ValueError("x"))


def test_failure_equality_uses_concrete_type() -> None:
    class Special(ValueError):
        pass

    assert Failure(Special("x")) != Failure(ValueError("x"))


def test_success_never_equals_failure() -> None:
    assert Success(1) != Failure(RuntimeError("1"))
    assert Failure(RuntimeError("1")) != Success(1)


def test_equality_with_non_results() -> None:
    assert Success(1) != 1
    assert (Success(1) == "1") is False


def test_equality_forces_both_operands(counter) -> None:
    left, right = Result.of(counter), Result.of(counter)

    assert left.same_outcome(right)
    assert counter.calls == 2
    assert left.is_evaluated and right.is_evaluated


def test_hash_forces_and_matches_equality() -> None:
    assert hash(Result.of(lambda: "v")) == hash(Success("v"))
    assert len({Success(1), Result.of(lambda: 1), Success(2)}) == 2


def test_repr_does_not_force(counter) -> None:
    result = Result.of(counter)

    assert repr(result) == "Result(<deferred>)"
    assert counter.calls == 0

    result.force()
    assert repr(result) == "Result(<evaluated: Success(42)>)"
    assert repr(Success(1)) == "Success(1)"
    assert repr(Success.void()) == "Success(<void>)"
    assert repr(Failure(KeyError("k"))) == "Failure(KeyError('k'))"
