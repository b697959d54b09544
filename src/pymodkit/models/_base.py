"""Base model and schema resolution for descriptors.

Every descriptor inherits from :class:`ModKitBaseModel` which provides a
frozen, ``extra="forbid"`` pydantic configuration so a misspelled
descriptor key fails at construction time instead of being ignored.

:func:`resolve_schema` turns the accepted "shape" inputs into one explicit
ordered schema of :class:`FieldSpec` entries:

* a pydantic ``BaseModel`` subclass: fields and defaults from
  ``model_fields`` (nested models are dumped to plain data)
* a mapping of ``{field_name: default}``
* an iterable of ``(field_name, default)`` pairs
"""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from pydantic import BaseModel, ConfigDict

from pymodkit.exceptions import ModuleDefinitionError


class FieldSpec(NamedTuple):
    name: str
    default: Any


Schema = tuple[FieldSpec, ...]


class ModKitBaseModel(BaseModel):
    """Base for descriptor models."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
        str_strip_whitespace=True,
    )


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value


def _schema_from_model(model: type[BaseModel]) -> Schema:
    specs: list[FieldSpec] = []
    for name, info in model.model_fields.items():
        if info.is_required():
            raise ModuleDefinitionError(
                f"{model.__name__}.{name} has no default",
                source=model,
                field=name,
            )
        specs.append(FieldSpec(name, _plain(info.get_default(call_default_factory=True))))
    return tuple(specs)


def resolve_schema(source: Any) -> Schema:
    """Resolve *source* into an ordered ``(name, default)`` schema.

    Raises
    ------
    ModuleDefinitionError
        When *source* is not one of the accepted shapes, or a field has no
        default value.
    """
    if isinstance(source, type) and issubclass(source, BaseModel):
        return _schema_from_model(source)
    if isinstance(source, Mapping):
        pairs: Iterable[Any] = source.items()
    elif isinstance(source, Iterable) and not isinstance(source, (str, bytes)):
        pairs = source
    else:
        raise ModuleDefinitionError(f"cannot derive a schema from {source!r}", source=source)

    specs: list[FieldSpec] = []
    for pair in pairs:
        try:
            name, default = pair
        except (TypeError, ValueError) as err:
            raise ModuleDefinitionError(f"schema entry {pair!r} is not a (name, default) pair", source=source) from err
        if not isinstance(name, str) or not name:
            raise ModuleDefinitionError(f"schema field name {name!r} must be a non-empty string", source=source)
        specs.append(FieldSpec(name, _plain(default)))
    return tuple(specs)


def schema_defaults(schema: Schema) -> dict[str, Any]:
    """Fresh, unaliased ``{name: default}`` mapping for *schema*."""
    return {spec.name: copy.deepcopy(spec.default) for spec in schema}
