"""Tests for view bindings."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
import pytest_asyncio
from pydantic import BaseModel

from pymodkit.lifecycle.bindings import Computed, build_bindings
from pymodkit.lifecycle.page import Page, PageHooks, PageView
from pymodkit.models import CollectionDescriptor, ComplexTypeDescriptor, ComposedModule, ModuleDefinition, Section
from pymodkit.state.store import ModuleStore


class Board(BaseModel):
    title: str = "Board"


class Job(BaseModel):
    id: int = 0
    name: str = ""


class Filter(BaseModel):
    text: str = ""


def _definition() -> ModuleDefinition:
    return ModuleDefinition(
        model=Board,
        collections=[CollectionDescriptor(single="job", plural="jobs", item_type=Job)],
        complex_types=[ComplexTypeDescriptor(name="filter", type=Filter)],
        state=lambda: {"jobs": [], "filter": {"text": ""}},
    )


@pytest_asyncio.fixture
async def bound(store: ModuleStore, tokens: Callable[[], str]) -> dict[str, Any]:
    page = Page(store, "board", definition=_definition(), token_factory=tokens)
    view = page.view()
    await view.pre_fetch()
    return view.setup()


def test_binding_names(store: ModuleStore) -> None:
    bindings = build_bindings(store, "board", _definition())
    assert set(bindings) == {
        "title",
        "saveOrUpdateJob",
        "deleteJob",
        "jobsIndex",
        "jobById",
        "setIdOfAJob",
        "setNameOfAJob",
        "setPropertyOfCollectionItem",
        "textOfFilter",
    }


@pytest.mark.asyncio
async def test_model_field_two_way(bound: dict[str, Any], store: ModuleStore) -> None:
    title: Computed = bound["title"]
    assert title.value == "Board"

    title.value = "Sprint"
    assert store.state["board"]["title"] == "Sprint"


@pytest.mark.asyncio
async def test_collection_actions_and_getters(bound: dict[str, Any]) -> None:
    await bound["saveOrUpdateJob"]({"id": 1, "name": "x"})
    assert bound["jobsIndex"].value == {1: {"id": 1, "name": "x"}}
    assert bound["jobsIndex"].readonly

    await bound["setNameOfAJob"](1, "y")
    assert bound["jobById"].value(1) == {"id": 1, "name": "y"}

    await bound["deleteJob"](1)
    assert bound["jobById"].value(1) is None

    with pytest.raises(AttributeError):
        bound["jobsIndex"].value = {}


@pytest.mark.asyncio
async def test_complex_type_two_way(bound: dict[str, Any], store: ModuleStore) -> None:
    text: Computed = bound["textOfFilter"]
    text.value = "python"
    assert store.state["board"]["filter"]["text"] == "python"
    assert text.value == "python"


def test_bindings_read_none_when_unregistered(store: ModuleStore) -> None:
    bindings = build_bindings(store, "board", _definition())
    assert bindings["title"].value is None
    assert bindings["textOfFilter"].value is None
    assert bindings["jobsIndex"].value is None


def test_getter_errors_are_not_read_as_missing(store: ModuleStore) -> None:
    def broken(state: Any, getters: Any) -> Any:
        raise KeyError("jobs")

    store.register_module(
        "board",
        ComposedModule(state=Section.value({}), getters={"jobsIndex": broken}),
    )
    bindings = build_bindings(store, "board", _definition())

    with pytest.raises(KeyError):
        bindings["jobsIndex"].value
    assert bindings["jobById"].value is None


@pytest.mark.asyncio
async def test_user_setup_extends_bindings(store: ModuleStore, tokens: Callable[[], str]) -> None:
    def setup(view: PageView, bindings: dict[str, Any]) -> dict[str, Any]:
        return {"shout": lambda: bindings["title"].value.upper()}

    page = Page(store, "board", definition=_definition(), hooks=PageHooks(setup=setup), token_factory=tokens)
    view = page.view()
    await view.pre_fetch()

    bindings = view.setup()
    assert bindings["shout"]() == "BOARD"
    assert "saveOrUpdateJob" in bindings
