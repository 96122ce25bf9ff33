"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance with the migrations
applied (``alembic upgrade head``).
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.settings import DatabaseSettings


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        CUSTOMER_API_DB_HOST, CUSTOMER_API_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("CUSTOMER_API_DB_HOST", "localhost"),
        port=int(os.getenv("CUSTOMER_API_DB_PORT", "5432")),
        database=os.getenv("CUSTOMER_API_DB_DATABASE", "customers"),
        username=os.getenv("CUSTOMER_API_DB_USERNAME", "customers"),
        password=SecretStr(
            os.getenv("CUSTOMER_API_DB_PASSWORD", "customers_dev_password")
        ),
    )


@pytest_asyncio.fixture
async def async_session(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for integration tests."""
    engine = create_write_engine(integration_db_settings)
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False)

    async with sessionmaker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def clean_customer_data(
    async_session: AsyncSession,
) -> AsyncGenerator[AsyncSession, None]:
    """Empty the project and customer tables before and after each test.

    Projects go first because they reference customers.
    """

    async def cleanup() -> None:
        async with async_session.begin():
            await async_session.execute(text("DELETE FROM project"))
            await async_session.execute(text("DELETE FROM customer"))

    await cleanup()
    yield async_session
    await cleanup()
