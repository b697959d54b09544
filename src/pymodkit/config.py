"""Library configuration for pymodkit."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pymodkit.exceptions import ModuleDefinitionError


@dataclasses.dataclass(frozen=True)
class ModKitConfig:
    """Naming configuration shared by the builder, the store and pages.

    Parameters
    ----------
    validation_field : str
        Hidden state field used by the liveness probe token exchange.
    fetched_field : str
        Hidden state field recording whether ``initialize`` completed for
        the current attachment.
    upsert_prefix : str
        Default prefix of the collection insert-or-replace mutation/action.
    delete_prefix : str
        Default prefix of the collection delete mutation/action.
    separator : str
        Separator between the module name and a mutation/action/getter
        name in namespaced paths.
    """

    validation_field: str = "@@"
    fetched_field: str = "@fetched"
    upsert_prefix: str = "saveOrUpdate"
    delete_prefix: str = "delete"
    separator: str = "/"

    def __post_init__(self) -> None:
        if not self.validation_field or not self.fetched_field:
            raise ModuleDefinitionError("hidden field names must be non-empty")
        if self.validation_field == self.fetched_field:
            raise ModuleDefinitionError(
                "validation_field and fetched_field must differ",
                field=self.validation_field,
            )
        if not self.separator:
            raise ModuleDefinitionError("separator must be non-empty")

    @property
    def reserved_fields(self) -> dict[str, Any]:
        """Hidden bookkeeping fields and their initial values."""
        return {self.validation_field: 0, self.fetched_field: False}

    def path(self, module_name: str, key: str) -> str:
        """Namespaced path of *key* inside *module_name*."""
        return f"{module_name}{self.separator}{key}"

    @classmethod
    def from_env(cls, **overrides: Any) -> ModKitConfig:
        """Create configuration from ``MODKIT_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        _ENV_CONFIG_MAP = {
            "MODKIT_VALIDATION_FIELD": "validation_field",
            "MODKIT_FETCHED_FIELD": "fetched_field",
            "MODKIT_UPSERT_PREFIX": "upsert_prefix",
            "MODKIT_DELETE_PREFIX": "delete_prefix",
            "MODKIT_SEPARATOR": "separator",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        config_kwargs.update(overrides)
        return cls(**config_kwargs)


DEFAULT_CONFIG = ModKitConfig()
