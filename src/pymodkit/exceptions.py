"""Custom exception hierarchy for pymodkit."""

from __future__ import annotations


class ModKitError(Exception):
    """Base exception for all pymodkit errors."""


class ModuleDefinitionError(ModKitError):
    """A module definition or descriptor cannot be turned into a module.

    Raised at build time for schema problems: a model field without a
    default, a type that cannot be read as a schema, or a user field that
    collides with a reserved bookkeeping name.  These are programmer errors
    and are never caught inside the library.
    """

    def __init__(self, message: str, *, source: object = None, field: str = "") -> None:
        self.source = source
        self.field = field
        super().__init__(message)


class ModuleRegistrationError(ModKitError):
    """A module could not be registered with the store."""

    def __init__(self, message: str, *, module_name: str = "") -> None:
        self.module_name = module_name
        super().__init__(message)
