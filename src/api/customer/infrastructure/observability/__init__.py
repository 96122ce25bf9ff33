"""Observability for customer infrastructure."""

from customer.infrastructure.observability.repository_probe import (
    CustomerRepositoryProbe,
    DefaultCustomerRepositoryProbe,
)

__all__ = [
    "CustomerRepositoryProbe",
    "DefaultCustomerRepositoryProbe",
]
