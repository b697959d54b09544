from __future__ import annotations

from collections.abc import Callable

import pytest

from pymodkit.state.store import ModuleStore


@pytest.fixture
def store() -> ModuleStore:
    return ModuleStore()


@pytest.fixture
def tokens() -> Callable[[], str]:
    """Deterministic probe tokens: T1, T2, ..."""
    counter = iter(range(1, 1_000_000))
    return lambda: f"T{next(counter)}"
