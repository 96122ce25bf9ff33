"""Value objects for the Customer domain.

Customers are the unit of tenancy: each customer name is a tenant key in the
external authorization index.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class Customer:
    """A customer row as read from the primary store.

    Attributes:
        id: Stable identifier, immutable once assigned
        name: Globally unique name, used as the tenant key
        comment: Free-form comment
        private_key: Deploy key material, only set when provided
        created: Creation timestamp assigned by the store
    """

    id: int
    name: str
    comment: str | None
    private_key: str | None
    created: datetime


def _blank_to_none(value: str | None) -> str | None:
    if value is None or value == "":
        return None
    return value


class CustomerInput(BaseModel):
    """Input for creating a customer.

    ``id`` may be supplied by the caller; when omitted the store assigns it.
    Empty optional strings are treated as absent so the store receives NULL,
    never an empty string standing in for "no value".
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=100)
    id: int | None = Field(default=None, gt=0)
    comment: str | None = None
    private_key: str | None = None

    @field_validator("comment", "private_key")
    @classmethod
    def blank_is_absent(cls, value: str | None) -> str | None:
        """Normalize empty strings to None."""
        return _blank_to_none(value)


class CustomerPatch(BaseModel):
    """Partial update for a customer.

    Only attributes explicitly provided are applied; an explicit ``None``
    clears ``comment`` or ``private_key``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = Field(default=None, min_length=1, max_length=100)
    comment: str | None = None
    private_key: str | None = None

    @field_validator("name")
    @classmethod
    def name_not_null(cls, value: str | None) -> str | None:
        """A provided name must be a real value."""
        if value is None:
            raise ValueError("name cannot be cleared")
        return value

    @field_validator("comment", "private_key")
    @classmethod
    def blank_clears(cls, value: str | None) -> str | None:
        """An empty string clears the attribute, like an explicit None."""
        return _blank_to_none(value)

    def changes(self) -> dict[str, Any]:
        """Return the provided attributes and their new values."""
        return {field: getattr(self, field) for field in sorted(self.model_fields_set)}

    def is_empty(self) -> bool:
        """Whether the patch changes nothing."""
        return not self.model_fields_set

    @property
    def renames(self) -> bool:
        """Whether the patch changes the tenant key."""
        return "name" in self.model_fields_set


@dataclass(frozen=True)
class CustomerFilters:
    """Optional filters for customer listings."""

    created_after: datetime | None = None
