"""Domain probe for tenant index operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to pushing role definitions to the
external tenant index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantIndexProbe(Protocol):
    """Domain probe for tenant index operations."""

    def role_replaced(self, role_name: str, tenant_count: int) -> None:
        """Record that a role definition was replaced in the index."""
        ...

    def role_replace_rejected(
        self,
        role_name: str,
        status_code: int,
        body: str,
    ) -> None:
        """Record that the index answered a role replace with an error status."""
        ...

    def index_unreachable(self, endpoint: str, error: Exception) -> None:
        """Record that the index could not be reached."""
        ...

    def with_context(self, context: ObservationContext) -> TenantIndexProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantIndexProbe:
    """Default implementation of TenantIndexProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTenantIndexProbe:
        """Create a new probe with observation context bound."""
        return DefaultTenantIndexProbe(logger=self._logger, context=context)

    def role_replaced(self, role_name: str, tenant_count: int) -> None:
        """Record that a role definition was replaced in the index."""
        self._logger.info(
            "tenant_index_role_replaced",
            role_name=role_name,
            tenant_count=tenant_count,
            **self._get_context_kwargs(),
        )

    def role_replace_rejected(
        self,
        role_name: str,
        status_code: int,
        body: str,
    ) -> None:
        """Record that the index answered a role replace with an error status."""
        self._logger.error(
            "tenant_index_role_replace_rejected",
            role_name=role_name,
            status_code=status_code,
            body=body,
            **self._get_context_kwargs(),
        )

    def index_unreachable(self, endpoint: str, error: Exception) -> None:
        """Record that the index could not be reached."""
        self._logger.error(
            "tenant_index_unreachable",
            endpoint=endpoint,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
