"""Value-or-factory variant for module sections.

A module section (``state``, ``mutations``, ``actions``, ``getters``) may be
authored as a plain mapping or as a zero-argument callable producing one.
:class:`Section` makes that distinction explicit so the merger and the
store can treat both uniformly.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from pymodkit.exceptions import ModuleDefinitionError


class SectionKind(StrEnum):
    VALUE = "value"
    FACTORY = "factory"


@dataclass(frozen=True, slots=True)
class Section:
    kind: SectionKind
    data: Mapping[str, Any] | None = None
    produce: Callable[[], Mapping[str, Any]] | None = None

    @classmethod
    def value(cls, data: Mapping[str, Any]) -> Section:
        return cls(kind=SectionKind.VALUE, data=data)

    @classmethod
    def factory(cls, produce: Callable[[], Mapping[str, Any]]) -> Section:
        return cls(kind=SectionKind.FACTORY, produce=produce)

    @classmethod
    def coerce(cls, raw: Any) -> Section | None:
        """Wrap an authored section; ``None`` stays ``None``."""
        if raw is None or isinstance(raw, Section):
            return raw
        if isinstance(raw, Mapping):
            return cls.value(raw)
        if callable(raw):
            return cls.factory(raw)
        raise ModuleDefinitionError(f"section must be a mapping or a factory, got {type(raw).__name__}", source=raw)

    @property
    def is_factory(self) -> bool:
        return self.kind is SectionKind.FACTORY

    def materialize(self) -> dict[str, Any]:
        """Return the section contents, invoking the factory if needed."""
        if self.kind is SectionKind.FACTORY:
            assert self.produce is not None  # noqa: S101
            produced = self.produce()
            if not isinstance(produced, Mapping):
                raise ModuleDefinitionError(
                    f"section factory returned {type(produced).__name__}, expected a mapping",
                    source=self.produce,
                )
            return dict(produced)
        assert self.data is not None  # noqa: S101
        return dict(self.data)
