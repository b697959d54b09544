from __future__ import annotations

import pytest

from pymodkit.config import ModKitConfig
from pymodkit.exceptions import ModuleDefinitionError


def test_defaults() -> None:
    config = ModKitConfig()
    assert config.reserved_fields == {"@@": 0, "@fetched": False}
    assert config.path("jobs", "initialize") == "jobs/initialize"


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODKIT_VALIDATION_FIELD", "__probe")
    monkeypatch.setenv("MODKIT_UPSERT_PREFIX", "upsert")
    monkeypatch.setenv("MODKIT_SEPARATOR", ".")

    config = ModKitConfig.from_env(delete_prefix="remove")

    assert config.validation_field == "__probe"
    assert config.upsert_prefix == "upsert"
    assert config.delete_prefix == "remove"
    assert config.path("jobs", "x") == "jobs.x"


def test_explicit_override_beats_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODKIT_FETCHED_FIELD", "_env")
    assert ModKitConfig.from_env(fetched_field="_kw").fetched_field == "_kw"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"validation_field": ""},
        {"validation_field": "x", "fetched_field": "x"},
        {"separator": ""},
    ],
)
def test_invalid(kwargs: dict[str, str]) -> None:
    with pytest.raises(ModuleDefinitionError):
        ModKitConfig(**kwargs)
