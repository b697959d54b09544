"""Complex-type mapper: per-property members for a singleton object.

For ``ComplexTypeDescriptor(name="filter", type=Filter)`` and a ``size``
field this yields the mutation and action ``setSizeOfFilter`` and the getter
``sizeOfFilter``, all operating on ``state["filter"]["size"]``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pymodkit._naming import get_cases
from pymodkit.compose.merge import union_fragments
from pymodkit.models.descriptors import ComplexTypeDescriptor
from pymodkit.models.module import Action, Getter, Mutation
from pymodkit.models.section import Section

if TYPE_CHECKING:
    from pymodkit.state.store import ActionContext


def property_names(descriptor: ComplexTypeDescriptor, field: str) -> tuple[str, str]:
    """``(setter, getter)`` names for *field* of *descriptor*."""
    type_name = get_cases(descriptor.name).pascal
    cases = get_cases(field)
    return f"set{cases.pascal}Of{type_name}", f"{cases.camel}Of{type_name}"


def _set_mutation(name: str, field: str) -> Mutation:
    def mutation(state: dict[str, Any], value: Any) -> None:
        target = state.get(name)
        if not isinstance(target, dict):
            target = state[name] = {}
        target[field] = value

    return mutation


def _set_action(mutation_name: str) -> Action:
    async def action(context: ActionContext, value: Any) -> Any:
        context.commit(mutation_name, value)
        return value

    return action


def _getter(name: str, field: str) -> Getter:
    def getter(state: Mapping[str, Any], getters: Mapping[str, Any]) -> Any:
        target = state.get(name)
        if not isinstance(target, Mapping):
            return None
        return target.get(field)

    return getter


def map_complex_type(descriptor: ComplexTypeDescriptor) -> dict[str, dict[str, Any]]:
    mutations: dict[str, Mutation] = {}
    actions: dict[str, Action] = {}
    getters: dict[str, Getter] = {}
    for spec in descriptor.property_schema:
        setter, getter = property_names(descriptor, spec.name)
        mutations[setter] = _set_mutation(descriptor.name, spec.name)
        actions[setter] = _set_action(setter)
        getters[getter] = _getter(descriptor.name, spec.name)
    return {"mutations": mutations, "actions": actions, "getters": getters}


def map_complex_types(descriptors: Sequence[ComplexTypeDescriptor]) -> dict[str, Section]:
    return union_fragments([map_complex_type(descriptor) for descriptor in descriptors])
