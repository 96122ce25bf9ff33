"""Protocol for customer application service observability.

Defines the interface for domain probes that capture application-level
domain events for customer service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CustomerServiceProbe(Protocol):
    """Domain probe for customer application service operations."""

    def operation_denied(self, operation: str, role: str, reason: str) -> None:
        """Record that the policy rejected an operation."""
        ...

    def operation_failed(self, operation: str, kind: str, message: str) -> None:
        """Record that an allowed operation failed."""
        ...

    def customer_created(self, customer_id: int, name: str) -> None:
        """Record that a customer was created."""
        ...

    def customer_updated(self, customer_id: int, renamed: bool) -> None:
        """Record that a customer was updated."""
        ...

    def customer_deleted(self, name: str) -> None:
        """Record that a customer was deleted."""
        ...

    def customers_deleted(self, count: int) -> None:
        """Record that all customers were deleted."""
        ...

    def tenant_index_stale(self, operation: str, error: str) -> None:
        """Record that a committed mutation could not be propagated."""
        ...

    def with_context(self, context: ObservationContext) -> CustomerServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCustomerServiceProbe:
    """Default implementation of CustomerServiceProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultCustomerServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultCustomerServiceProbe(logger=self._logger, context=context)

    def operation_denied(self, operation: str, role: str, reason: str) -> None:
        """Record that the policy rejected an operation."""
        self._logger.warning(
            "customer_operation_denied",
            operation=operation,
            role=role,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, kind: str, message: str) -> None:
        """Record that an allowed operation failed."""
        self._logger.error(
            "customer_operation_failed",
            operation=operation,
            kind=kind,
            message=message,
            **self._get_context_kwargs(),
        )

    def customer_created(self, customer_id: int, name: str) -> None:
        """Record that a customer was created."""
        self._logger.info(
            "customer_service_customer_created",
            customer_id=customer_id,
            name=name,
            **self._get_context_kwargs(),
        )

    def customer_updated(self, customer_id: int, renamed: bool) -> None:
        """Record that a customer was updated."""
        self._logger.info(
            "customer_service_customer_updated",
            customer_id=customer_id,
            renamed=renamed,
            **self._get_context_kwargs(),
        )

    def customer_deleted(self, name: str) -> None:
        """Record that a customer was deleted."""
        self._logger.info(
            "customer_service_customer_deleted",
            name=name,
            **self._get_context_kwargs(),
        )

    def customers_deleted(self, count: int) -> None:
        """Record that all customers were deleted."""
        self._logger.warning(
            "customer_service_customers_deleted",
            count=count,
            **self._get_context_kwargs(),
        )

    def tenant_index_stale(self, operation: str, error: str) -> None:
        """Record that a committed mutation could not be propagated."""
        self._logger.error(
            "customer_service_tenant_index_stale",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
