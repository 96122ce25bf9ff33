"""Operation outcomes returned to callers of the customer service.

Expected conditions (unauthorized, invalid patch, not found) are reported
as values rather than raised, so the transport layer can map every outcome
without catching exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(StrEnum):
    """Category of a failed customer operation."""

    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    STORE = "store"
    SYNC = "sync"


@dataclass(frozen=True)
class OperationError:
    """Why an operation failed."""

    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class OperationResult(Generic[T]):
    """Outcome of a customer operation.

    A SYNC error is the only kind that comes with a ``value``: the store
    mutation was committed but the tenant index may be stale.
    """

    value: T | None = None
    error: OperationError | None = None

    @property
    def ok(self) -> bool:
        """Whether the operation fully succeeded."""
        return self.error is None

    @classmethod
    def success(cls, value: T) -> OperationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        value: T | None = None,
    ) -> OperationResult[T]:
        return cls(value=value, error=OperationError(kind=kind, message=message))
