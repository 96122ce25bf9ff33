"""Probes for the database engines backing the customer store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Records engine lifecycle events for the read and write pools."""

    def engine_created(
        self, role: str, connection_string: str, pool_size: int
    ) -> None: ...

    def pool_closed(self, role: str) -> None: ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe: ...


class DefaultConnectionProbe:
    """structlog-backed ConnectionProbe.

    ``connection_string`` never carries the password; see
    ``DatabaseSettings.connection_string``.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _context_kwargs(self) -> dict[str, Any]:
        return {} if self._context is None else self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def engine_created(self, role: str, connection_string: str, pool_size: int) -> None:
        self._logger.info(
            "database_engine_created",
            role=role,
            connection_string=connection_string,
            pool_size=pool_size,
            **self._context_kwargs(),
        )

    def pool_closed(self, role: str) -> None:
        self._logger.info(
            "connection_pool_closed",
            role=role,
            **self._context_kwargs(),
        )
