"""Collection mapper: CRUD-style members for an id-keyed list of items.

For a descriptor ``CollectionDescriptor(single="job", plural="jobs")`` and
the default prefixes this yields:

* mutation + action ``saveOrUpdateJob(item)``: insert or replace by id
* mutation + action ``deleteJob(id)``
* getter ``jobsIndex``: ``{id: item}``, rebuilt from state on every access
* getter ``jobById``: lookup callable ``(id) -> item | None``

A descriptor with an ``item_type`` additionally gets the shared
``setPropertyOfCollectionItem`` mutation/action and one
``set{Property}Of{A|An}{Single}`` action per item field.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from pymodkit._naming import get_cases, indefinite_article
from pymodkit.compose.merge import union_fragments
from pymodkit.config import DEFAULT_CONFIG, ModKitConfig
from pymodkit.models.descriptors import CollectionDescriptor
from pymodkit.models.module import Action, Getter, Mutation
from pymodkit.models.section import Section

if TYPE_CHECKING:
    from pymodkit.state.store import ActionContext

SET_PROPERTY_OF_COLLECTION_ITEM = "setPropertyOfCollectionItem"


def _as_item(item: Any) -> dict[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump()
    if isinstance(item, Mapping):
        return copy.deepcopy(dict(item))
    raise TypeError(f"collection items must be mappings, got {type(item).__name__}")


def _find(items: list[Any], id_field: str, item_id: Any) -> int | None:
    for position, existing in enumerate(items):
        if isinstance(existing, Mapping) and existing.get(id_field) == item_id:
            return position
    return None


def _upsert_mutation(plural: str, id_field: str) -> Mutation:
    def mutation(state: dict[str, Any], item: Any) -> None:
        item = _as_item(item)
        items = state.get(plural)
        if items is None:
            items = state[plural] = []
        position = _find(items, id_field, item.get(id_field))
        if position is None:
            items.append(item)
        else:
            items[position] = item

    return mutation


def _delete_mutation(plural: str, id_field: str) -> Mutation:
    def mutation(state: dict[str, Any], item_id: Any) -> None:
        items = state.get(plural)
        if not items:
            return
        position = _find(items, id_field, item_id)
        if position is not None:
            del items[position]

    return mutation


def _commit_action(mutation_name: str) -> Action:
    async def action(context: ActionContext, payload: Any) -> Any:
        context.commit(mutation_name, payload)
        return payload

    return action


def _index_getter(plural: str, id_field: str) -> Getter:
    def getter(state: Mapping[str, Any], getters: Mapping[str, Any]) -> dict[Any, Any]:
        return {
            item[id_field]: item
            for item in state.get(plural) or ()
            if isinstance(item, Mapping) and id_field in item
        }

    return getter


def _by_id_getter(index_name: str) -> Getter:
    def getter(state: Mapping[str, Any], getters: Mapping[str, Any]) -> Any:
        return getters[index_name].get

    return getter


def _set_property_mutation(id_fields: Mapping[str, str]) -> Mutation:
    def mutation(state: dict[str, Any], payload: Mapping[str, Any]) -> None:
        collection = payload["collection"]
        id_field = id_fields.get(collection)
        items = state.get(collection)
        if id_field is None or not items:
            return
        position = _find(items, id_field, payload["id"])
        if position is not None:
            items[position][payload["property"]] = payload["value"]

    return mutation


def _property_action(plural: str, field: str) -> Action:
    async def action(context: ActionContext, payload: Mapping[str, Any]) -> Any:
        context.commit(
            SET_PROPERTY_OF_COLLECTION_ITEM,
            {"id": payload["id"], "collection": plural, "property": field, "value": payload["value"]},
        )
        return payload["value"]

    return action


def property_action_name(descriptor: CollectionDescriptor, field: str) -> str:
    single = get_cases(descriptor.single).pascal
    return f"set{get_cases(field).pascal}Of{indefinite_article(single)}{single}"


def member_names(descriptor: CollectionDescriptor, config: ModKitConfig = DEFAULT_CONFIG) -> dict[str, str]:
    """Generated member names for *descriptor*, keyed by role."""
    single = get_cases(descriptor.single)
    plural = get_cases(descriptor.plural)
    upsert_prefix = descriptor.upsert_prefix or config.upsert_prefix
    delete_prefix = descriptor.delete_prefix or config.delete_prefix
    return {
        "upsert": f"{upsert_prefix}{single.pascal}",
        "delete": f"{delete_prefix}{single.pascal}",
        "index": f"{plural.camel}Index",
        "by_id": f"{single.camel}ById",
    }


def map_collection(
    descriptor: CollectionDescriptor,
    config: ModKitConfig = DEFAULT_CONFIG,
) -> dict[str, dict[str, Any]]:
    """Members contributed by one collection, keyed by section name."""
    names = member_names(descriptor, config)
    plural, id_field = descriptor.plural, descriptor.id_field

    mutations: dict[str, Mutation] = {
        names["upsert"]: _upsert_mutation(plural, id_field),
        names["delete"]: _delete_mutation(plural, id_field),
    }
    actions: dict[str, Action] = {
        names["upsert"]: _commit_action(names["upsert"]),
        names["delete"]: _commit_action(names["delete"]),
    }
    getters: dict[str, Getter] = {
        names["index"]: _index_getter(plural, id_field),
        names["by_id"]: _by_id_getter(names["index"]),
    }

    schema = descriptor.item_schema
    if schema is not None:
        for spec in schema:
            actions[property_action_name(descriptor, spec.name)] = _property_action(plural, spec.name)

    return {"mutations": mutations, "actions": actions, "getters": getters}


def map_collections(
    descriptors: Sequence[CollectionDescriptor],
    config: ModKitConfig = DEFAULT_CONFIG,
) -> dict[str, Section]:
    fragments = [map_collection(descriptor, config) for descriptor in descriptors]

    id_fields = {d.plural: d.id_field for d in descriptors if d.item_type is not None}
    if id_fields:
        fragments.append(
            {
                "mutations": {SET_PROPERTY_OF_COLLECTION_ITEM: _set_property_mutation(id_fields)},
                "actions": {SET_PROPERTY_OF_COLLECTION_ITEM: _commit_action(SET_PROPERTY_OF_COLLECTION_ITEM)},
            }
        )
    return union_fragments(fragments)
