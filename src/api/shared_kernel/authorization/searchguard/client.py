"""SearchGuard client implementation of the tenant index provider.

Talks to the SearchGuard REST management API over HTTP with basic auth.
"""

from __future__ import annotations

from urllib.parse import quote

import httpx

from shared_kernel.authorization.observability import (
    DefaultTenantIndexProbe,
    TenantIndexProbe,
)
from shared_kernel.authorization.searchguard.exceptions import (
    TenantIndexRequestError,
)
from shared_kernel.authorization.types import RoleDefinition

ROLES_API_PATH = "/_searchguard/api/roles"


class SearchGuardClient:
    """SearchGuard implementation of the TenantIndexProvider protocol.

    Every call opens a short-lived ``httpx.AsyncClient``; role replacement is
    rare (once per customer mutation) so no connection is kept around.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: float = 10.0,
        verify_tls: bool = True,
        probe: TenantIndexProbe | None = None,
    ):
        """Initialize SearchGuard client.

        Args:
            base_url: Elasticsearch base URL (e.g., "https://logs-db:9200")
            username: Basic auth username
            password: Basic auth password
            timeout: Request timeout in seconds
            verify_tls: Whether to verify TLS certificates
            probe: Optional domain probe for observability
        """
        self._base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(username, password)
        self._timeout = timeout
        self._verify_tls = verify_tls
        self._probe = probe or DefaultTenantIndexProbe()

    def role_url(self, role_name: str) -> str:
        """Return the roles API URL for ``role_name``."""
        return f"{self._base_url}{ROLES_API_PATH}/{quote(role_name, safe='')}"

    async def replace_role(self, role_name: str, definition: RoleDefinition) -> None:
        """Create or fully replace a SearchGuard role.

        Args:
            role_name: Role identifier
            definition: Capability grants and tenant mapping

        Raises:
            TenantIndexRequestError: On transport failure or a non-2xx answer
        """
        url = self.role_url(role_name)

        try:
            async with httpx.AsyncClient(
                auth=self._auth,
                timeout=self._timeout,
                verify=self._verify_tls,
            ) as client:
                response = await client.put(url, json=definition.to_body())
        except httpx.HTTPError as e:
            self._probe.index_unreachable(endpoint=url, error=e)
            raise TenantIndexRequestError(
                f"SearchGuard error while replacing role {role_name}: {e}"
            ) from e

        if response.is_error:
            self._probe.role_replace_rejected(
                role_name=role_name,
                status_code=response.status_code,
                body=response.text,
            )
            raise TenantIndexRequestError(
                f"SearchGuard error while replacing role {role_name}: "
                f"{response.status_code} {response.text}",
                status_code=response.status_code,
            )

        self._probe.role_replaced(
            role_name=role_name,
            tenant_count=len(definition.tenants.tenants),
        )
