"""Domain probe for customer repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to customer persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CustomerRepositoryProbe(Protocol):
    """Domain probe for customer repository operations."""

    def customer_created(self, customer_id: int, name: str) -> None:
        """Record that a customer was created."""
        ...

    def customer_retrieved(self, customer_id: int, lookup: str) -> None:
        """Record that a customer was retrieved."""
        ...

    def customer_not_found(self, lookup: str, key: str) -> None:
        """Record that a lookup matched no visible customer."""
        ...

    def customers_listed(self, count: int, filtered: bool) -> None:
        """Record that customers were listed."""
        ...

    def customer_updated(self, customer_id: int, fields: list[str]) -> None:
        """Record that a customer was updated."""
        ...

    def customer_deleted(self, name: str) -> None:
        """Record that a customer was deleted."""
        ...

    def customers_truncated(self, count: int) -> None:
        """Record that every customer was deleted."""
        ...

    def duplicate_customer_name(self, name: str) -> None:
        """Record that a duplicate customer name was detected."""
        ...

    def store_failed(self, operation: str, error: Exception) -> None:
        """Record that the primary store failed a statement."""
        ...

    def with_context(self, context: ObservationContext) -> CustomerRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCustomerRepositoryProbe:
    """Default implementation of CustomerRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultCustomerRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultCustomerRepositoryProbe(logger=self._logger, context=context)

    def customer_created(self, customer_id: int, name: str) -> None:
        self._logger.info(
            "customer_created",
            customer_id=customer_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def customer_retrieved(self, customer_id: int, lookup: str) -> None:
        self._logger.debug(
            "customer_retrieved",
            customer_id=customer_id,
            lookup=lookup,
            **self._get_context_kwargs(),
        )

    def customer_not_found(self, lookup: str, key: str) -> None:
        self._logger.debug(
            "customer_not_found",
            lookup=lookup,
            key=key,
            **self._get_context_kwargs(),
        )

    def customers_listed(self, count: int, filtered: bool) -> None:
        self._logger.debug(
            "customers_listed",
            count=count,
            filtered=filtered,
            **self._get_context_kwargs(),
        )

    def customer_updated(self, customer_id: int, fields: list[str]) -> None:
        self._logger.info(
            "customer_updated",
            customer_id=customer_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def customer_deleted(self, name: str) -> None:
        self._logger.info(
            "customer_deleted",
            name=name,
            **self._get_context_kwargs(),
        )

    def customers_truncated(self, count: int) -> None:
        self._logger.warning(
            "customers_truncated",
            count=count,
            **self._get_context_kwargs(),
        )

    def duplicate_customer_name(self, name: str) -> None:
        self._logger.warning(
            "duplicate_customer_name",
            name=name,
            **self._get_context_kwargs(),
        )

    def store_failed(self, operation: str, error: Exception) -> None:
        self._logger.error(
            "customer_store_failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
