"""Data models for module descriptors, sections and composed modules."""

from pymodkit.models._base import FieldSpec, ModKitBaseModel, Schema, resolve_schema, schema_defaults
from pymodkit.models.descriptors import CollectionDescriptor, ComplexTypeDescriptor
from pymodkit.models.module import SECTION_NAMES, ComposedModule, ModuleDefinition
from pymodkit.models.section import Section, SectionKind

__all__ = [
    "SECTION_NAMES",
    "CollectionDescriptor",
    "ComplexTypeDescriptor",
    "ComposedModule",
    "FieldSpec",
    "ModKitBaseModel",
    "ModuleDefinition",
    "Schema",
    "Section",
    "SectionKind",
    "resolve_schema",
    "schema_defaults",
]
