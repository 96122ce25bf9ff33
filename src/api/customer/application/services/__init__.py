"""Application services for the Customer bounded context."""

from customer.application.services.customer_service import CustomerService
from customer.application.services.tenant_index_synchronizer import (
    TenantIndexSynchronizer,
)

__all__ = [
    "CustomerService",
    "TenantIndexSynchronizer",
]
