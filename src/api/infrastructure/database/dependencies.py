"""FastAPI session providers for the customer store.

Reads and mutations use separate engines, each created lazily the first time
a session of that kind is requested and disposed on shutdown.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_read_engine, create_write_engine
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import DatabaseSettings, get_database_settings

_probe = DefaultConnectionProbe()


@dataclass
class _EngineSlot:
    """Lazily created engine and its sessionmaker for one role."""

    role: str
    factory: Callable[[DatabaseSettings], AsyncEngine]
    engine: AsyncEngine | None = None
    sessionmaker: async_sessionmaker[AsyncSession] | None = None
    lock: threading.Lock = field(default_factory=threading.Lock)

    def get_engine(self) -> AsyncEngine:
        if self.engine is None:
            with self.lock:
                if self.engine is None:
                    settings = get_database_settings()
                    engine = self.factory(settings)
                    self.sessionmaker = async_sessionmaker(
                        engine,
                        expire_on_commit=False,
                        class_=AsyncSession,
                    )
                    self.engine = engine
                    _probe.engine_created(
                        role=self.role,
                        connection_string=settings.connection_string,
                        pool_size=engine.pool.size(),
                    )
        return self.engine

    def session(self) -> AsyncSession:
        self.get_engine()
        assert self.sessionmaker is not None
        return self.sessionmaker()

    async def dispose(self) -> None:
        if self.engine is None:
            return
        await self.engine.dispose()
        _probe.pool_closed(role=self.role)
        self.engine = None
        self.sessionmaker = None


_write = _EngineSlot(role="write", factory=create_write_engine)
_read = _EngineSlot(role="read", factory=create_read_engine)


def get_write_engine() -> AsyncEngine:
    """Get the engine used for customer mutations and tenant resyncs."""
    return _write.get_engine()


def get_read_engine() -> AsyncEngine:
    """Get the engine used for permission-filtered reads."""
    return _read.get_engine()


async def get_write_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a write session (FastAPI dependency).

    The session does NOT auto-commit. The customer service opens its own
    ``async with session.begin()`` block per mutation and per resync.

    Yields:
        AsyncSession bound to the write engine
    """
    async with _write.session() as session:
        yield session


async def get_read_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a read session (FastAPI dependency).

    Yields:
        AsyncSession bound to the read engine
    """
    async with _read.session() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose both engines so the next request recreates them.

    This is the shutdown hook for the process hosting the providers: call it
    after the last request, e.g. after ``yield`` in a FastAPI lifespan
    handler.
    """
    await _write.dispose()
    await _read.dispose()
