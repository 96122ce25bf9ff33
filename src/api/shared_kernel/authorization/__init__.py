"""Authorization primitives shared across resources.

Caller identity types, the tenant access mapping, and the protocol for the
external tenant index (SearchGuard).
"""

from shared_kernel.authorization.types import (
    ADMIN_TENANT,
    AccessLevel,
    CallerCredentials,
    CallerRole,
    PermissionSet,
    RoleDefinition,
    TenantAccessMapping,
)

__all__ = [
    "ADMIN_TENANT",
    "AccessLevel",
    "CallerCredentials",
    "CallerRole",
    "PermissionSet",
    "RoleDefinition",
    "TenantAccessMapping",
]
