"""Async SQLAlchemy engines for the customer store.

Mutations and reads get separate asyncpg connection pools. The write pool is
fixed at ``pool_max_connections``; the read pool keeps ``pool_min_connections``
open and overflows up to the same maximum under load.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_async_url",
    "create_read_engine",
    "create_write_engine",
]

DRIVER_NAME = "postgresql+asyncpg"


def build_async_url(settings: DatabaseSettings) -> str:
    """Render the asyncpg URL for ``settings``.

    Credentials are percent-encoded by ``URL.create``, so passwords may
    contain reserved characters.
    """
    url = URL.create(
        drivername=DRIVER_NAME,
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )
    return url.render_as_string(hide_password=False)


def _create_engine(
    settings: DatabaseSettings, pool_size: int, max_overflow: int
) -> AsyncEngine:
    return create_async_engine(
        build_async_url(settings),
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        echo=False,
    )


def create_write_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine for customer mutations and tenant resyncs.

    Args:
        settings: Database connection settings

    Returns:
        Async engine with a fixed-size pool
    """
    return _create_engine(
        settings,
        pool_size=settings.pool_max_connections,
        max_overflow=0,
    )


def create_read_engine(settings: DatabaseSettings) -> AsyncEngine:
    """Create the engine for permission-filtered reads.

    ``CustomerService`` runs its lookups and listings here (see
    ``get_customer_read_repository``) so they never hold connections the
    mutations need.
    Pointing this at a replica only requires different settings.
    """
    return _create_engine(
        settings,
        pool_size=settings.pool_min_connections,
        max_overflow=settings.pool_max_connections - settings.pool_min_connections,
    )
