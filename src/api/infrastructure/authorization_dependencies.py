"""Tenant index client dependency injection.

Provides the SearchGuard client factory for dependency injection in FastAPI
endpoints and application services.

Note: Each call creates a new SearchGuardClient instance. The client holds no
connection of its own, so no singleton/locking is needed.
"""

from __future__ import annotations

from infrastructure.settings import get_searchguard_settings
from shared_kernel.authorization.protocols import TenantIndexProvider
from shared_kernel.authorization.searchguard.client import SearchGuardClient


def get_tenant_index_client() -> TenantIndexProvider:
    """Get a SearchGuard tenant index client configured from settings.

    Returns:
        Configured client implementing the TenantIndexProvider protocol
    """
    settings = get_searchguard_settings()
    return SearchGuardClient(
        base_url=settings.url,
        username=settings.username,
        password=settings.password.get_secret_value(),
        timeout=settings.timeout_seconds,
        verify_tls=settings.verify_tls,
    )
