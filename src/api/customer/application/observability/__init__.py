"""Application-level observability for the Customer bounded context."""

from customer.application.observability.customer_service_probe import (
    CustomerServiceProbe,
    DefaultCustomerServiceProbe,
)
from customer.application.observability.tenant_index_sync_probe import (
    DefaultTenantIndexSyncProbe,
    TenantIndexSyncProbe,
)

__all__ = [
    "CustomerServiceProbe",
    "DefaultCustomerServiceProbe",
    "DefaultTenantIndexSyncProbe",
    "TenantIndexSyncProbe",
]
