"""Module composition: mappers, the section merger and the module builder."""

from pymodkit.compose.builder import build_module
from pymodkit.compose.collection import SET_PROPERTY_OF_COLLECTION_ITEM, map_collection, map_collections
from pymodkit.compose.complex_type import map_complex_type, map_complex_types
from pymodkit.compose.merge import merge_section
from pymodkit.compose.model import assign_mutation, map_model

__all__ = [
    "SET_PROPERTY_OF_COLLECTION_ITEM",
    "assign_mutation",
    "build_module",
    "map_collection",
    "map_collections",
    "map_complex_type",
    "map_complex_types",
    "map_model",
    "merge_section",
]
