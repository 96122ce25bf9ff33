"""Customer domain layer."""

from customer.domain.value_objects import (
    Customer,
    CustomerFilters,
    CustomerInput,
    CustomerPatch,
)

__all__ = [
    "Customer",
    "CustomerFilters",
    "CustomerInput",
    "CustomerPatch",
]
