"""Repository protocols (ports) for the Customer bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from sqlalchemy.sql.elements import ColumnElement

from customer.domain.value_objects import (
    Customer,
    CustomerFilters,
    CustomerInput,
    CustomerPatch,
)

RowPredicate = ColumnElement[bool] | None
"""Access predicate built by the policy evaluator; None means unrestricted."""


@dataclass(frozen=True)
class VisibilityColumns:
    """Store columns that read predicates are built over.

    Supplied by the infrastructure layer so predicates reference the same
    table objects the repository selects from.

    Attributes:
        customer_id: Customer primary key
        project_id: Project primary key
        project_customer: Owning customer of a project
    """

    customer_id: ColumnElement[Any]
    project_id: ColumnElement[Any]
    project_customer: ColumnElement[Any]


@runtime_checkable
class ICustomerRepository(Protocol):
    """Repository for customer rows in the primary store.

    Reads accept the access predicate produced by the policy evaluator and
    return None for "not found" instead of raising. Store failures raise
    CustomerStoreError.
    """

    async def create(self, customer: CustomerInput) -> Customer:
        """Insert a customer through the create procedure.

        Raises:
            DuplicateCustomerNameError: If the name is already taken
            CustomerStoreError: If the store fails
        """
        ...

    async def get_by_id(
        self, customer_id: int, predicate: RowPredicate = None
    ) -> Customer | None:
        """Fetch a customer by id, subject to ``predicate``."""
        ...

    async def get_by_name(
        self, name: str, predicate: RowPredicate = None
    ) -> Customer | None:
        """Fetch a customer by its unique name, subject to ``predicate``."""
        ...

    async def get_by_project_id(
        self, project_id: int, predicate: RowPredicate = None
    ) -> Customer | None:
        """Fetch the customer owning ``project_id``, subject to ``predicate``."""
        ...

    async def list_all(
        self,
        filters: CustomerFilters | None = None,
        predicate: RowPredicate = None,
    ) -> list[Customer]:
        """List customers in insertion order, subject to filters and predicate."""
        ...

    async def list_names(self) -> list[str]:
        """Return the names of every existing customer."""
        ...

    async def update(self, customer_id: int, patch: CustomerPatch) -> Customer | None:
        """Apply ``patch`` and return the re-fetched row, or None if no such id.

        Raises:
            DuplicateCustomerNameError: If a rename collides
            CustomerStoreError: If the store fails
        """
        ...

    async def delete(self, name: str) -> bool:
        """Delete by name. Returns False when no customer has that name."""
        ...

    async def delete_all(self) -> int:
        """Delete every customer. Returns the number of rows removed."""
        ...
