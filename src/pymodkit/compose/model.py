"""Model mapper: state factory plus one assignment mutation per field."""

from __future__ import annotations

from typing import Any

from pymodkit.models._base import Schema, resolve_schema, schema_defaults
from pymodkit.models.module import Mutation
from pymodkit.models.section import Section


def assign_mutation(field: str) -> Mutation:
    """Mutation that writes its payload verbatim to ``state[field]``."""

    def mutation(state: dict[str, Any], value: Any) -> None:
        state[field] = value

    mutation.__name__ = f"assign_{field}"
    return mutation


def map_model(model: Any) -> dict[str, Section]:
    schema: Schema = resolve_schema(model)

    def produce() -> dict[str, Any]:
        return schema_defaults(schema)

    return {
        "state": Section.factory(produce),
        "mutations": Section.value({spec.name: assign_mutation(spec.name) for spec in schema}),
    }
