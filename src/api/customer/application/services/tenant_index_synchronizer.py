"""Synchronization of the SearchGuard tenant mapping with the customer table.

The mapping is never patched: every resync reads all customer names and
replaces the whole role, so whichever resync finishes last leaves the index
correct for the state it read.
"""

from __future__ import annotations

import asyncio

from customer.application.observability import (
    DefaultTenantIndexSyncProbe,
    TenantIndexSyncProbe,
)
from customer.ports.exceptions import CustomerStoreError, TenantSyncError
from customer.ports.repositories import ICustomerRepository
from shared_kernel.authorization.protocols import TenantIndexProvider
from shared_kernel.authorization.searchguard.exceptions import TenantIndexError
from shared_kernel.authorization.types import RoleDefinition, TenantAccessMapping

DEFAULT_ROLE_NAME = "lagoonadmin"


class TenantIndexSynchronizer:
    """Rebuilds and pushes the tenant access mapping.

    Resyncs are serialized through ``lock``; pass the same lock to every
    synchronizer in a process so only one full replace is in flight.
    """

    def __init__(
        self,
        repository: ICustomerRepository,
        index: TenantIndexProvider,
        role_name: str = DEFAULT_ROLE_NAME,
        lock: asyncio.Lock | None = None,
        probe: TenantIndexSyncProbe | None = None,
    ):
        """Initialize the synchronizer.

        Args:
            repository: Source of the current customer names
            index: External tenant index
            role_name: Role whose tenant mapping mirrors the customers
            lock: Lock serializing resyncs (a private one if omitted)
            probe: Optional domain probe for observability
        """
        self._repository = repository
        self._index = index
        self._role_name = role_name
        self._lock = lock or asyncio.Lock()
        self._probe = probe or DefaultTenantIndexSyncProbe()

    async def resync(self) -> TenantAccessMapping:
        """Push a mapping of every current customer name plus the admin tenant.

        Safe to call repeatedly; each call is a full replace.

        Returns:
            The mapping that was pushed

        Raises:
            TenantSyncError: If the names could not be read or the push failed
        """
        async with self._lock:
            self._probe.resync_started(self._role_name)

            try:
                names = await self._repository.list_names()
            except CustomerStoreError as e:
                self._probe.resync_failed(self._role_name, stage="read", error=e)
                raise TenantSyncError(
                    f"Could not read customer names for role {self._role_name}: {e}"
                ) from e

            mapping = TenantAccessMapping.from_customer_names(names)

            try:
                await self._index.replace_role(
                    self._role_name,
                    RoleDefinition(tenants=mapping),
                )
            except TenantIndexError as e:
                self._probe.resync_failed(self._role_name, stage="push", error=e)
                raise TenantSyncError(
                    f"SearchGuard Error while replacing role {self._role_name}: {e}"
                ) from e

            self._probe.resync_completed(
                self._role_name, tenant_count=len(mapping.tenants)
            )
            return mapping
