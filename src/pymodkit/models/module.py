"""Module definition (input) and composed module (output) containers."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from pymodkit.models.descriptors import CollectionDescriptor, ComplexTypeDescriptor
from pymodkit.models.section import Section

Mutation = Callable[[dict[str, Any], Any], None]
Action = Callable[[Any, Any], Any]
Getter = Callable[[Mapping[str, Any], Mapping[str, Any]], Any]

SECTION_NAMES: tuple[str, ...] = ("state", "mutations", "actions", "getters")


@dataclass(frozen=True)
class ModuleDefinition:
    """Everything an author declares for one module.

    ``state``, ``mutations``, ``actions`` and ``getters`` may each be a
    plain mapping, a zero-argument factory returning one, or a
    :class:`Section`.  ``model`` is a schema source accepted by
    :func:`pymodkit.models._base.resolve_schema`.  ``initialize`` is the
    fallback ``initialize`` action used when no section provides one.
    """

    model: Any = None
    collections: Sequence[CollectionDescriptor] = ()
    complex_types: Sequence[ComplexTypeDescriptor] = ()
    state: Any = None
    mutations: Any = None
    actions: Any = None
    getters: Any = None
    initialize: Action | None = None


@dataclass(frozen=True)
class ComposedModule:
    """A finished module, ready to be registered under a name."""

    state: Section
    mutations: dict[str, Mutation] = field(default_factory=dict)
    actions: dict[str, Action] = field(default_factory=dict)
    getters: dict[str, Getter] = field(default_factory=dict)
    namespaced: bool = True
