"""Protocol for tenant index synchronization observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class TenantIndexSyncProbe(Protocol):
    """Domain probe for tenant index resync operations."""

    def resync_started(self, role_name: str) -> None:
        """Record that a resync started."""
        ...

    def resync_completed(self, role_name: str, tenant_count: int) -> None:
        """Record that a resync pushed a complete mapping."""
        ...

    def resync_failed(self, role_name: str, stage: str, error: Exception) -> None:
        """Record that a resync failed while reading names or pushing."""
        ...

    def with_context(self, context: ObservationContext) -> TenantIndexSyncProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTenantIndexSyncProbe:
    """Default implementation of TenantIndexSyncProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultTenantIndexSyncProbe:
        return DefaultTenantIndexSyncProbe(logger=self._logger, context=context)

    def resync_started(self, role_name: str) -> None:
        self._logger.debug(
            "tenant_index_resync_started",
            role_name=role_name,
            **self._get_context_kwargs(),
        )

    def resync_completed(self, role_name: str, tenant_count: int) -> None:
        self._logger.info(
            "tenant_index_resync_completed",
            role_name=role_name,
            tenant_count=tenant_count,
            **self._get_context_kwargs(),
        )

    def resync_failed(self, role_name: str, stage: str, error: Exception) -> None:
        self._logger.error(
            "tenant_index_resync_failed",
            role_name=role_name,
            stage=stage,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
