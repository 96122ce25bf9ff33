"""Tenant index provider protocol.

Defines the interface for the external authorization index, allowing for
swappable implementations (SearchGuard, fakes in tests).
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from shared_kernel.authorization.types import RoleDefinition


@runtime_checkable
class TenantIndexProvider(Protocol):
    """Protocol for the external tenant/role index.

    The only operation is an idempotent create-or-replace of a whole role.
    Implementations must never patch a role partially.
    """

    async def replace_role(self, role_name: str, definition: RoleDefinition) -> None:
        """Create or fully replace a role.

        Args:
            role_name: Fixed role identifier (e.g., "lagoonadmin")
            definition: Capability grants and tenant mapping for the role

        Raises:
            TenantIndexError: If the index rejects the request or is unreachable
        """
        ...
