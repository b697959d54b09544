"""Tests for complex-type generated members."""

from __future__ import annotations

import pytest
from pydantic import BaseModel

from pymodkit.compose.builder import build_module
from pymodkit.compose.complex_type import map_complex_types, property_names
from pymodkit.models import ComplexTypeDescriptor, ModuleDefinition
from pymodkit.state.store import ModuleStore


class Filter(BaseModel):
    text: str = ""
    page_size: int = 20


def _filter_store(store: ModuleStore) -> None:
    module = build_module(
        ModuleDefinition(
            complex_types=[ComplexTypeDescriptor(name="filter", type=Filter)],
            state=lambda: {"filter": Filter().model_dump()},
        )
    )
    store.register_module("search", module)


def test_member_names() -> None:
    descriptor = ComplexTypeDescriptor(name="filter", type=Filter)
    assert property_names(descriptor, "page_size") == ("setPageSizeOfFilter", "pageSizeOfFilter")

    fragment = map_complex_types([descriptor])
    assert set(fragment["mutations"].materialize()) == {"setTextOfFilter", "setPageSizeOfFilter"}
    assert set(fragment["actions"].materialize()) == {"setTextOfFilter", "setPageSizeOfFilter"}
    assert set(fragment["getters"].materialize()) == {"textOfFilter", "pageSizeOfFilter"}


def test_mutation_and_getter(store: ModuleStore) -> None:
    _filter_store(store)
    assert store.getters["search/pageSizeOfFilter"] == 20

    store.commit("search/setPageSizeOfFilter", 50)
    assert store.state["search"]["filter"] == {"text": "", "page_size": 50}
    assert store.getters["search/pageSizeOfFilter"] == 50


@pytest.mark.asyncio
async def test_action_commits(store: ModuleStore) -> None:
    _filter_store(store)
    assert await store.dispatch("search/setTextOfFilter", "rust") == "rust"
    assert store.getters["search/textOfFilter"] == "rust"


def test_missing_object_is_created_on_write(store: ModuleStore) -> None:
    module = build_module(ModuleDefinition(complex_types=[ComplexTypeDescriptor(name="filter", type={"text": ""})]))
    store.register_module("search", module)

    assert store.getters["search/textOfFilter"] is None
    store.commit("search/setTextOfFilter", "go")
    assert store.state["search"]["filter"] == {"text": "go"}
