"""Module builder: assemble a :class:`ComposedModule` from a definition.

Steps, in order:

1. model schema -> state factory + one assignment mutation per field
2. collection descriptors -> CRUD mutations/actions/getters
3. complex-type descriptors -> per-property mutations/actions/getters
4. hidden bookkeeping fields (probe token, fetch flag) injected into the
   user state, with their assignment mutations
5. one merge per section, user -> model -> collections -> complex types
6. namespaced
7. a no-op ``initialize`` action when none was supplied
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from pymodkit.compose.collection import map_collections
from pymodkit.compose.complex_type import map_complex_types
from pymodkit.compose.merge import merge_section
from pymodkit.compose.model import assign_mutation, map_model
from pymodkit.config import DEFAULT_CONFIG, ModKitConfig
from pymodkit.exceptions import ModuleDefinitionError
from pymodkit.models._base import resolve_schema
from pymodkit.models.module import SECTION_NAMES, ComposedModule, ModuleDefinition
from pymodkit.models.section import Section

_logger = logging.getLogger(__name__)


async def _noop_initialize(context: Any, payload: Any) -> None:
    return None


def _with_reserved(section: Section | None, extra: dict[str, Any]) -> Section:
    """Add *extra* keys to *section*, keeping it a factory if it was one."""
    if section is None:
        return Section.value(copy.deepcopy(extra))
    if section.is_factory:
        original = section

        def produce() -> dict[str, Any]:
            data = original.materialize()
            data.update(copy.deepcopy(extra))
            return data

        return Section.factory(produce)
    return Section.value({**section.materialize(), **extra})


def _check_reserved(definition: ModuleDefinition, config: ModKitConfig) -> None:
    reserved = set(config.reserved_fields)
    clashes: set[str] = set()
    if definition.model is not None:
        clashes |= reserved & {spec.name for spec in resolve_schema(definition.model)}
    clashes |= reserved & {d.plural for d in definition.collections}
    clashes |= reserved & {d.name for d in definition.complex_types}
    if clashes:
        name = sorted(clashes)[0]
        raise ModuleDefinitionError(f"{name!r} is reserved for module bookkeeping", field=name)


def build_module(definition: ModuleDefinition, *, config: ModKitConfig | None = None) -> ComposedModule:
    """Compose *definition* into a namespaced module.

    Raises
    ------
    ModuleDefinitionError
        When a schema cannot be resolved or uses a reserved field name.
    """
    config = config or DEFAULT_CONFIG
    _check_reserved(definition, config)

    model = map_model(definition.model) if definition.model is not None else None
    collections = map_collections(definition.collections, config) if definition.collections else None
    complex_types = map_complex_types(definition.complex_types) if definition.complex_types else None

    user: dict[str, Section | None] = {name: Section.coerce(getattr(definition, name)) for name in SECTION_NAMES}
    reserved = config.reserved_fields
    user["state"] = _with_reserved(user["state"], reserved)
    user["mutations"] = _with_reserved(
        user["mutations"],
        {field: assign_mutation(field) for field in reserved},
    )

    merged = {
        name: merge_section(
            name,
            user=user[name],
            model=model,
            collections=collections,
            complex_types=complex_types,
        )
        for name in SECTION_NAMES
    }

    state = merged["state"]
    assert state is not None  # noqa: S101
    mutations = merged["mutations"].materialize() if merged["mutations"] else {}
    actions = merged["actions"].materialize() if merged["actions"] else {}
    getters = merged["getters"].materialize() if merged["getters"] else {}
    if "initialize" not in actions:
        actions["initialize"] = definition.initialize or _noop_initialize

    _logger.debug(
        "Built module state=%s mutations=%d actions=%d getters=%d",
        state.kind,
        len(mutations),
        len(actions),
        len(getters),
    )
    return ComposedModule(state=state, mutations=mutations, actions=actions, getters=getters, namespaced=True)
