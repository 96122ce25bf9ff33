"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.authorization.types import (
    CallerCredentials,
    CallerRole,
    PermissionSet,
)


@pytest.fixture
def mock_session():
    """Mock AsyncSession whose begin() works as an async context manager."""
    session = Mock(spec=AsyncSession)

    ctx_manager = AsyncMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=None)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    session.begin = Mock(return_value=ctx_manager)
    session.execute = AsyncMock()
    return session


@pytest.fixture
def admin_credentials() -> CallerCredentials:
    """Credentials of an admin caller."""
    return CallerCredentials(role=CallerRole.ADMIN)


@pytest.fixture
def user_credentials() -> CallerCredentials:
    """Credentials of a non-admin caller with no grants."""
    return CallerCredentials(role=CallerRole.USER, permissions=PermissionSet())
