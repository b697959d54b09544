"""Declarative descriptors consumed by the collection and complex-type mappers."""

from __future__ import annotations

import re
from typing import Any

from pydantic import Field, field_validator

from pymodkit.models._base import ModKitBaseModel, Schema, resolve_schema

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_\-]*$")


def _check_identifier(value: str) -> str:
    if not _IDENTIFIER_RE.match(value):
        raise ValueError(f"{value!r} is not a usable identifier")
    return value


def _check_schema(value: Any) -> Any:
    # Resolving eagerly surfaces a bad type at descriptor construction.
    resolve_schema(value)
    return value


class CollectionDescriptor(ModKitBaseModel):
    """An ordered, id-keyed set of items stored under ``state[plural]``."""

    single: str = Field(..., description="Singular form (job, person)")
    plural: str = Field(..., description="Plural form, also the state field name (jobs, people)")
    id_field: str = Field(default="id", description="Name of the id field of each item")
    item_type: Any = Field(default=None, description="Item schema; enables per-property setters")
    upsert_prefix: str | None = Field(default=None, description="Overrides the configured upsert prefix")
    delete_prefix: str | None = Field(default=None, description="Overrides the configured delete prefix")

    @field_validator("single", "plural", "id_field")
    @classmethod
    def _identifier(cls, value: str) -> str:
        return _check_identifier(value)

    @field_validator("upsert_prefix", "delete_prefix")
    @classmethod
    def _prefix(cls, value: str | None) -> str | None:
        if value is None:
            return value
        return _check_identifier(value)

    @field_validator("item_type")
    @classmethod
    def _item_schema(cls, value: Any) -> Any:
        if value is None:
            return value
        return _check_schema(value)

    @property
    def item_schema(self) -> Schema | None:
        if self.item_type is None:
            return None
        return resolve_schema(self.item_type)


class ComplexTypeDescriptor(ModKitBaseModel):
    """A singleton structured value stored under ``state[name]``."""

    name: str
    type: Any

    @field_validator("name")
    @classmethod
    def _identifier(cls, value: str) -> str:
        return _check_identifier(value)

    @field_validator("type")
    @classmethod
    def _type_schema(cls, value: Any) -> Any:
        return _check_schema(value)

    @property
    def property_schema(self) -> Schema:
        return resolve_schema(self.type)
