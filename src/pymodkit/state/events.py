"""Store notifications.

Every registration, unregistration and committed mutation is reported to
store subscribers as one frozen :class:`StoreEvent`.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StoreEventKind(StrEnum):
    REGISTER = "register"
    UNREGISTER = "unregister"
    COMMIT = "commit"


class StoreEvent(BaseModel):
    """One change applied to the module store."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: StoreEventKind
    module: str = Field(..., description="Module name")
    instance_id: int = Field(..., description="Store-assigned id of the affected module instance")
    mutation: str | None = Field(default=None, description="Mutation name (commit events only)")
    payload: Any = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("module")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("module must be non-empty")
        return value
