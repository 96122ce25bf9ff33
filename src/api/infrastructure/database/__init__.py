"""Engines and session providers for the PostgreSQL customer store."""

from infrastructure.database.engines import (
    build_async_url,
    create_read_engine,
    create_write_engine,
)

__all__ = [
    "build_async_url",
    "create_read_engine",
    "create_write_engine",
]
