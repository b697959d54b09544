"""Bind generated members onto a view's exposed interface.

:func:`build_bindings` returns a flat ``{name: binding}`` mapping:

* model fields and complex-type properties become two-way
  :class:`Computed` accessors (read from state, write by commit)
* collection index/lookup getters become read-only :class:`Computed`
* collection actions become coroutine functions that dispatch to the store
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
from typing import Any

from pymodkit.compose.collection import SET_PROPERTY_OF_COLLECTION_ITEM, member_names, property_action_name
from pymodkit.compose.complex_type import property_names
from pymodkit.config import ModKitConfig
from pymodkit.models._base import resolve_schema
from pymodkit.models.module import ModuleDefinition
from pymodkit.state.store import ModuleStore

Dispatcher = Callable[..., Coroutine[Any, Any, Any]]


class Computed:
    """Accessor over store state exposed through ``.value``."""

    __slots__ = ("_get", "_set")

    def __init__(self, getter: Callable[[], Any], setter: Callable[[Any], None] | None = None) -> None:
        self._get = getter
        self._set = setter

    @property
    def readonly(self) -> bool:
        return self._set is None

    @property
    def value(self) -> Any:
        return self._get()

    @value.setter
    def value(self, value: Any) -> None:
        if self._set is None:
            raise AttributeError("read-only binding")
        self._set(value)

    def __repr__(self) -> str:
        return f"Computed(readonly={self.readonly})"


def _read(store: ModuleStore, module_name: str, *keys: str) -> Any:
    value: Any = store.state.get(module_name)
    for key in keys:
        if value is None:
            return None
        value = value.get(key)
    return value


def _field_binding(store: ModuleStore, module_name: str, mutation_path: str, *keys: str) -> Computed:
    return Computed(
        lambda: _read(store, module_name, *keys),
        lambda value: store.commit(mutation_path, value),
    )


def _getter_binding(store: ModuleStore, path: str) -> Computed:
    def read() -> Any:
        getters = store.getters
        return getters[path] if path in getters else None

    return Computed(read)


def _dispatcher(store: ModuleStore, path: str) -> Dispatcher:
    async def call(payload: Any = None) -> Any:
        return await store.dispatch(path, payload)

    return call


def _property_dispatcher(store: ModuleStore, path: str) -> Dispatcher:
    async def call(item_id: Any, value: Any) -> Any:
        return await store.dispatch(path, {"id": item_id, "value": value})

    return call


def build_bindings(
    store: ModuleStore,
    module_name: str,
    definition: ModuleDefinition,
    config: ModKitConfig | None = None,
) -> dict[str, Any]:
    config = config or store.config
    bindings: dict[str, Any] = {}

    if definition.model is not None:
        for spec in resolve_schema(definition.model):
            bindings[spec.name] = _field_binding(store, module_name, config.path(module_name, spec.name), spec.name)

    typed = False
    for collection in definition.collections:
        names = member_names(collection, config)
        bindings[names["upsert"]] = _dispatcher(store, config.path(module_name, names["upsert"]))
        bindings[names["delete"]] = _dispatcher(store, config.path(module_name, names["delete"]))
        bindings[names["index"]] = _getter_binding(store, config.path(module_name, names["index"]))
        bindings[names["by_id"]] = _getter_binding(store, config.path(module_name, names["by_id"]))
        schema = collection.item_schema
        if schema is None:
            continue
        typed = True
        for spec in schema:
            action = property_action_name(collection, spec.name)
            bindings[action] = _property_dispatcher(store, config.path(module_name, action))
    if typed:
        bindings[SET_PROPERTY_OF_COLLECTION_ITEM] = _dispatcher(
            store, config.path(module_name, SET_PROPERTY_OF_COLLECTION_ITEM)
        )

    for complex_type in definition.complex_types:
        for spec in complex_type.property_schema:
            setter, getter = property_names(complex_type, spec.name)
            bindings[getter] = _field_binding(
                store,
                module_name,
                config.path(module_name, setter),
                complex_type.name,
                spec.name,
            )

    return bindings
