"""SearchGuard implementation of the tenant index provider."""

from shared_kernel.authorization.searchguard.client import SearchGuardClient
from shared_kernel.authorization.searchguard.exceptions import (
    TenantIndexError,
    TenantIndexRequestError,
)

__all__ = [
    "SearchGuardClient",
    "TenantIndexError",
    "TenantIndexRequestError",
]
