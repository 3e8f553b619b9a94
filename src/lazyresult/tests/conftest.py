"""Shared fixtures for lazyresult tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from lazyresult.foundation.config import clear_settings_cache


class Counter:
    """Call counter usable as a thunk, mapper or callback."""

    def __init__(self, value: object = 42) -> None:
        self.calls = 0
        self.value = value

    def __call__(self, *_: object) -> object:
        self.calls += 1
        return self.value


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate tests from LAZYRESULT_* variables and the cached settings."""
    import os

    for key in [k for k in os.environ if k.startswith("LAZYRESULT_")]:
        monkeypatch.delenv(key)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def counter() -> Counter:
    return Counter()
