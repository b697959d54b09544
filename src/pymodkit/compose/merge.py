"""Field merger: combine the fragments of one module section.

Precedence is fixed: user, then model, then collections, then complex
types.  Later sources overwrite same-named keys of earlier ones.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from pymodkit.models.section import Section

Fragment = Mapping[str, Section]


def _deep_copy_factory(merged: dict[str, Any]) -> Section:
    def produce() -> dict[str, Any]:
        return copy.deepcopy(merged)

    return Section.factory(produce)


def merge_section(
    name: str,
    *,
    user: Section | None = None,
    model: Fragment | None = None,
    collections: Fragment | None = None,
    complex_types: Fragment | None = None,
) -> Section | None:
    """Merge every source that contributes to section *name*.

    With a single contributing source that source is returned as-is, so a
    factory stays a factory and a value stays the very same value.  With
    several sources the result is one merged mapping; if any of them was a
    factory the result is a factory handing out a fresh deep copy per call,
    so separately registered instances never share nested state.
    """
    sources = [
        source
        for source in (
            user,
            model.get(name) if model else None,
            collections.get(name) if collections else None,
            complex_types.get(name) if complex_types else None,
        )
        if source is not None
    ]

    if not sources:
        return user
    if len(sources) == 1:
        return sources[0]

    merged: dict[str, Any] = {}
    for source in sources:
        merged.update(source.materialize())

    if any(source.is_factory for source in sources):
        return _deep_copy_factory(merged)
    return Section.value(merged)


def union_fragments(fragments: list[dict[str, dict[str, Any]]]) -> dict[str, Section]:
    """Union per-descriptor contributions into one fragment of VALUE sections."""
    combined: dict[str, dict[str, Any]] = {}
    for fragment in fragments:
        for section, members in fragment.items():
            combined.setdefault(section, {}).update(members)
    return {section: Section.value(members) for section, members in combined.items() if members}
