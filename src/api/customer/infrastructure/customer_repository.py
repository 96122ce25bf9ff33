"""PostgreSQL implementation of ICustomerRepository.

Creation and deletion go through the ``create_customer`` and
``delete_customer`` procedures; everything else uses SQLAlchemy Core
statements so that every value is a bound parameter.

The repository never opens transactions itself. The application service
wraps each mutation and its confirmation read in ``session.begin()``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Integer, String, Text, bindparam, delete, select, text, update
from sqlalchemy.engine import Row
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from customer.domain.value_objects import (
    Customer,
    CustomerFilters,
    CustomerInput,
    CustomerPatch,
)
from customer.infrastructure.models import CustomerModel, ProjectModel
from customer.infrastructure.observability import (
    CustomerRepositoryProbe,
    DefaultCustomerRepositoryProbe,
)
from customer.ports.exceptions import CustomerStoreError, DuplicateCustomerNameError
from customer.ports.repositories import ICustomerRepository, RowPredicate
from shared_kernel.persistence import and_of_clauses

NAME_CONSTRAINT = "uq_customer_name"

CREATE_CUSTOMER = text(
    "CALL create_customer(:id, :name, :comment, :private_key)"
).bindparams(
    bindparam("id", type_=Integer),
    bindparam("name", type_=String),
    bindparam("comment", type_=Text),
    bindparam("private_key", type_=String),
)

DELETE_CUSTOMER = text("CALL delete_customer(:name)").bindparams(
    bindparam("name", type_=String),
)

_COLUMNS = (
    CustomerModel.id,
    CustomerModel.name,
    CustomerModel.comment,
    CustomerModel.private_key,
    CustomerModel.created,
)


def _to_customer(row: Row[Any]) -> Customer:
    return Customer(
        id=row.id,
        name=row.name,
        comment=row.comment,
        private_key=row.private_key,
        created=row.created,
    )


class CustomerRepository(ICustomerRepository):
    """Repository managing the customer table in PostgreSQL.

    Reads return plain Customer values built from column rows, so a read
    after an update in the same session always sees the updated values.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: CustomerRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultCustomerRepositoryProbe()

    async def _execute(
        self,
        operation: str,
        statement: Executable,
        params: dict[str, Any] | None = None,
        name: str | None = None,
    ) -> Any:
        """Execute a statement, translating driver errors into port errors."""
        try:
            if params is None:
                return await self._session.execute(statement)
            return await self._session.execute(statement, params)
        except IntegrityError as e:
            if name is not None and NAME_CONSTRAINT in str(e.orig):
                self._probe.duplicate_customer_name(name)
                raise DuplicateCustomerNameError(operation, name) from e
            self._probe.store_failed(operation, e)
            raise CustomerStoreError(operation, str(e.orig)) from e
        except SQLAlchemyError as e:
            self._probe.store_failed(operation, e)
            raise CustomerStoreError(operation, type(e).__name__) from e

    async def _fetch_one(
        self,
        operation: str,
        lookup: str,
        key: str,
        statement: Executable,
    ) -> Customer | None:
        result = await self._execute(operation, statement)
        row = result.first()
        if row is None:
            self._probe.customer_not_found(lookup=lookup, key=key)
            return None
        customer = _to_customer(row)
        self._probe.customer_retrieved(customer_id=customer.id, lookup=lookup)
        return customer

    async def create(self, customer: CustomerInput) -> Customer:
        """Insert a customer through ``create_customer`` and read it back.

        Absent optional fields are bound as NULL.
        """
        await self._execute(
            "create",
            CREATE_CUSTOMER,
            {
                "id": customer.id,
                "name": customer.name,
                "comment": customer.comment,
                "private_key": customer.private_key,
            },
            name=customer.name,
        )

        created = await self.get_by_name(customer.name)
        if created is None:
            raise CustomerStoreError(
                "create", f"Customer '{customer.name}' missing after insert"
            )

        self._probe.customer_created(customer_id=created.id, name=created.name)
        return created

    async def get_by_id(
        self, customer_id: int, predicate: RowPredicate = None
    ) -> Customer | None:
        stmt = select(*_COLUMNS).where(
            and_of_clauses([CustomerModel.id == customer_id, predicate])
        )
        return await self._fetch_one("get_by_id", "id", str(customer_id), stmt)

    async def get_by_name(
        self, name: str, predicate: RowPredicate = None
    ) -> Customer | None:
        stmt = select(*_COLUMNS).where(
            and_of_clauses([CustomerModel.name == name, predicate])
        )
        return await self._fetch_one("get_by_name", "name", name, stmt)

    async def get_by_project_id(
        self, project_id: int, predicate: RowPredicate = None
    ) -> Customer | None:
        """Fetch the customer owning a project, joining through ``project``.

        ``predicate`` may reference both customer and project columns.
        """
        stmt = (
            select(*_COLUMNS)
            .select_from(ProjectModel)
            .join(CustomerModel, ProjectModel.customer == CustomerModel.id)
            .where(and_of_clauses([ProjectModel.id == project_id, predicate]))
        )
        return await self._fetch_one(
            "get_by_project_id", "project_id", str(project_id), stmt
        )

    async def list_all(
        self,
        filters: CustomerFilters | None = None,
        predicate: RowPredicate = None,
    ) -> list[Customer]:
        """List customers ordered by creation, then id."""
        filters = filters or CustomerFilters()
        created_after = (
            CustomerModel.created >= filters.created_after
            if filters.created_after is not None
            else None
        )
        where = and_of_clauses([created_after, predicate])

        stmt = select(*_COLUMNS).order_by(CustomerModel.created, CustomerModel.id)
        if where is not None:
            stmt = stmt.where(where)

        result = await self._execute("list_all", stmt)
        customers = [_to_customer(row) for row in result.all()]

        self._probe.customers_listed(count=len(customers), filtered=where is not None)
        return customers

    async def list_names(self) -> list[str]:
        stmt = select(CustomerModel.name).order_by(CustomerModel.name)
        result = await self._execute("list_names", stmt)
        return list(result.scalars().all())

    async def update(self, customer_id: int, patch: CustomerPatch) -> Customer | None:
        """Apply the provided patch attributes and re-fetch the row."""
        changes = patch.changes()
        stmt = (
            update(CustomerModel.__table__)
            .where(CustomerModel.__table__.c.id == customer_id)
            .values(**changes)
        )
        result = await self._execute("update", stmt, name=changes.get("name"))
        if result.rowcount == 0:
            self._probe.customer_not_found(lookup="id", key=str(customer_id))
            return None

        self._probe.customer_updated(customer_id=customer_id, fields=list(changes))
        return await self.get_by_id(customer_id)

    async def delete(self, name: str) -> bool:
        """Delete by name through ``delete_customer``.

        Returns:
            True if deleted, False if no customer has that name
        """
        exists = select(CustomerModel.id).where(CustomerModel.name == name)
        result = await self._execute("delete", exists.with_for_update())
        if result.first() is None:
            self._probe.customer_not_found(lookup="name", key=name)
            return False

        await self._execute("delete", DELETE_CUSTOMER, {"name": name})
        self._probe.customer_deleted(name=name)
        return True

    async def delete_all(self) -> int:
        """Remove every customer row.

        Fails with CustomerStoreError while projects still reference customers.
        """
        result = await self._execute("delete_all", delete(CustomerModel.__table__))
        count = result.rowcount
        self._probe.customers_truncated(count=count)
        return count
