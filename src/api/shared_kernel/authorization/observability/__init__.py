"""Observability for tenant index operations."""

from shared_kernel.authorization.observability.authorization_probe import (
    DefaultTenantIndexProbe,
    TenantIndexProbe,
)

__all__ = [
    "DefaultTenantIndexProbe",
    "TenantIndexProbe",
]
