"""Customer application service.

Sequences every customer operation as: evaluate policy, run the repository
operation in a transaction, then (for mutations that change the set of
customer names) resync the tenant index. All outcomes are returned as
OperationResult values.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from customer.application.observability import (
    CustomerServiceProbe,
    DefaultCustomerServiceProbe,
)
from customer.application.policy import (
    AccessPolicyEvaluator,
    MutationKind,
    PolicyDecision,
    ReadScope,
)
from customer.application.results import ErrorKind, OperationResult
from customer.application.services.tenant_index_synchronizer import (
    TenantIndexSynchronizer,
)
from customer.domain.value_objects import (
    Customer,
    CustomerFilters,
    CustomerInput,
    CustomerPatch,
)
from customer.ports.exceptions import (
    CustomerStoreError,
    DuplicateCustomerNameError,
    TenantSyncError,
)
from customer.ports.repositories import ICustomerRepository, RowPredicate
from shared_kernel.authorization.types import CallerCredentials, TenantAccessMapping

T = TypeVar("T")


class CustomerService:
    """Application service for permission-filtered customer management.

    The service owns the transactions on its sessions: each operation runs
    in exactly one ``session.begin()`` block, and the tenant index resync
    runs in its own block after the mutation has committed. Lookups and
    listings use ``read_repository`` on ``read_session`` when given, so they
    draw from the read pool; mutations and resyncs always use the write
    session. A failed resync
    never rolls back the mutation; it is reported as ``ErrorKind.SYNC``
    alongside the committed value.
    """

    def __init__(
        self,
        customer_repository: ICustomerRepository,
        synchronizer: TenantIndexSynchronizer,
        session: AsyncSession,
        policy: AccessPolicyEvaluator,
        probe: CustomerServiceProbe | None = None,
        read_repository: ICustomerRepository | None = None,
        read_session: AsyncSession | None = None,
    ):
        """Initialize CustomerService with dependencies.

        Args:
            customer_repository: Repository for customer rows
            synchronizer: Tenant index synchronizer sharing the same repository
            session: Database session for transaction management
            policy: Access policy evaluator
            probe: Optional domain probe for observability
            read_repository: Repository for lookups and listings
                (defaults to ``customer_repository``)
            read_session: Session owning ``read_repository`` transactions
                (defaults to ``session``)
        """
        self._repository = customer_repository
        self._synchronizer = synchronizer
        self._session = session
        self._policy = policy
        self._probe = probe or DefaultCustomerServiceProbe()
        self._read_repository = (
            customer_repository if read_repository is None else read_repository
        )
        self._read_session = session if read_session is None else read_session

    def _denied(
        self,
        operation: str,
        credentials: CallerCredentials,
        decision: PolicyDecision,
    ) -> OperationResult[T]:
        assert decision.error is not None
        self._probe.operation_denied(
            operation=operation,
            role=credentials.role,
            reason=decision.error.message,
        )
        return OperationResult.failure(decision.error.kind, decision.error.message)

    def _failed(
        self,
        operation: str,
        kind: ErrorKind,
        message: str,
    ) -> OperationResult[T]:
        self._probe.operation_failed(operation=operation, kind=kind, message=message)
        return OperationResult.failure(kind, message)

    async def _resync(self, operation: str, value: T) -> OperationResult[T]:
        """Resync the tenant index after a committed mutation."""
        try:
            async with self._session.begin():
                await self._synchronizer.resync()
        except TenantSyncError as e:
            self._probe.tenant_index_stale(operation=operation, error=str(e))
            return OperationResult.failure(ErrorKind.SYNC, str(e), value=value)
        return OperationResult.success(value)

    async def add_customer(
        self,
        credentials: CallerCredentials,
        customer: CustomerInput,
    ) -> OperationResult[Customer]:
        """Create a customer and add its tenant to the index.

        Args:
            credentials: Caller identity
            customer: Customer to create

        Returns:
            The created customer, or AUTHORIZATION / CONFLICT / STORE / SYNC
        """
        operation = "add_customer"
        decision = self._policy.authorize_mutation(credentials, MutationKind.CREATE)
        if not decision.allowed:
            return self._denied(operation, credentials, decision)

        try:
            async with self._session.begin():
                created = await self._repository.create(customer)
        except DuplicateCustomerNameError as e:
            return self._failed(operation, ErrorKind.CONFLICT, str(e))
        except CustomerStoreError as e:
            return self._failed(operation, ErrorKind.STORE, str(e))

        self._probe.customer_created(customer_id=created.id, name=created.name)
        return await self._resync(operation, created)

    async def _read_one(
        self,
        operation: str,
        credentials: CallerCredentials,
        scope: ReadScope,
        lookup: Callable[[Any, RowPredicate], Awaitable[Customer | None]],
        key: Any,
    ) -> OperationResult[Customer]:
        decision = self._policy.authorize_read(credentials, scope)

        try:
            async with self._read_session.begin():
                customer = await lookup(key, decision.predicate)
        except CustomerStoreError as e:
            return self._failed(operation, ErrorKind.STORE, str(e))

        if customer is None:
            return OperationResult.failure(
                ErrorKind.NOT_FOUND, f"Customer not found: {key}"
            )
        return OperationResult.success(customer)

    async def get_customer_by_id(
        self,
        credentials: CallerCredentials,
        customer_id: int,
    ) -> OperationResult[Customer]:
        """Fetch a customer visible to the caller by id."""
        return await self._read_one(
            "get_customer_by_id",
            credentials,
            ReadScope.CUSTOMER,
            self._read_repository.get_by_id,
            customer_id,
        )

    async def get_customer_by_name(
        self,
        credentials: CallerCredentials,
        name: str,
    ) -> OperationResult[Customer]:
        """Fetch a customer visible to the caller by name."""
        return await self._read_one(
            "get_customer_by_name",
            credentials,
            ReadScope.CUSTOMER,
            self._read_repository.get_by_name,
            name,
        )

    async def get_customer_by_project_id(
        self,
        credentials: CallerCredentials,
        project_id: int,
    ) -> OperationResult[Customer]:
        """Fetch the customer owning a project, if visible to the caller."""
        return await self._read_one(
            "get_customer_by_project_id",
            credentials,
            ReadScope.PROJECT,
            self._read_repository.get_by_project_id,
            project_id,
        )

    async def list_customers(
        self,
        credentials: CallerCredentials,
        filters: CustomerFilters | None = None,
    ) -> OperationResult[list[Customer]]:
        """List customers visible to the caller. An empty list is a success."""
        decision = self._policy.authorize_read(credentials, ReadScope.CUSTOMER)

        try:
            async with self._read_session.begin():
                customers = await self._read_repository.list_all(
                    filters, decision.predicate
                )
        except CustomerStoreError as e:
            return self._failed("list_customers", ErrorKind.STORE, str(e))

        return OperationResult.success(customers)

    async def update_customer(
        self,
        credentials: CallerCredentials,
        customer_id: int,
        patch: CustomerPatch,
    ) -> OperationResult[Customer]:
        """Apply a partial update.

        The tenant index is resynced only when the patch renames the
        customer; attribute-only patches leave tenant membership unchanged.
        """
        operation = "update_customer"
        decision = self._policy.authorize_mutation(credentials, MutationKind.UPDATE)
        if not decision.allowed:
            return self._denied(operation, credentials, decision)

        validation = self._policy.validate_patch(patch)
        if not validation.allowed:
            return self._denied(operation, credentials, validation)

        try:
            async with self._session.begin():
                updated = await self._repository.update(customer_id, patch)
        except DuplicateCustomerNameError as e:
            return self._failed(operation, ErrorKind.CONFLICT, str(e))
        except CustomerStoreError as e:
            return self._failed(operation, ErrorKind.STORE, str(e))

        if updated is None:
            return OperationResult.failure(
                ErrorKind.NOT_FOUND, f"Customer not found: {customer_id}"
            )

        self._probe.customer_updated(customer_id=updated.id, renamed=patch.renames)
        if patch.renames:
            return await self._resync(operation, updated)
        return OperationResult.success(updated)

    async def delete_customer(
        self,
        credentials: CallerCredentials,
        name: str,
    ) -> OperationResult[str]:
        """Delete a customer by name and drop its tenant from the index.

        Deleting a name that does not exist is reported as NOT_FOUND and does
        not trigger a resync.
        """
        operation = "delete_customer"
        decision = self._policy.authorize_mutation(credentials, MutationKind.DELETE)
        if not decision.allowed:
            return self._denied(operation, credentials, decision)

        try:
            async with self._session.begin():
                deleted = await self._repository.delete(name)
        except CustomerStoreError as e:
            return self._failed(operation, ErrorKind.STORE, str(e))

        if not deleted:
            return OperationResult.failure(
                ErrorKind.NOT_FOUND, f"Customer not found: {name}"
            )

        self._probe.customer_deleted(name=name)
        return await self._resync(operation, name)

    async def delete_all_customers(
        self,
        credentials: CallerCredentials,
    ) -> OperationResult[int]:
        """Delete every customer and reduce the index to the admin tenant."""
        operation = "delete_all_customers"
        decision = self._policy.authorize_mutation(
            credentials, MutationKind.DELETE_ALL
        )
        if not decision.allowed:
            return self._denied(operation, credentials, decision)

        try:
            async with self._session.begin():
                count = await self._repository.delete_all()
        except CustomerStoreError as e:
            return self._failed(operation, ErrorKind.STORE, str(e))

        self._probe.customers_deleted(count=count)
        return await self._resync(operation, count)

    async def resync_tenant_index(
        self,
        credentials: CallerCredentials,
    ) -> OperationResult[TenantAccessMapping]:
        """Rebuild and push the tenant mapping on demand.

        Used by operators to close the inconsistency window left by a failed
        post-mutation resync.
        """
        operation = "resync_tenant_index"
        decision = self._policy.authorize_mutation(credentials, MutationKind.RESYNC)
        if not decision.allowed:
            return self._denied(operation, credentials, decision)

        try:
            async with self._session.begin():
                mapping = await self._synchronizer.resync()
        except TenantSyncError as e:
            self._probe.tenant_index_stale(operation=operation, error=str(e))
            return OperationResult.failure(ErrorKind.SYNC, str(e))

        return OperationResult.success(mapping)
