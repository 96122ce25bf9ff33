"""Authorization type definitions.

Caller identity types consumed by permission-filtered repositories, and the
tenant access mapping pushed to the external SearchGuard index.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

ADMIN_TENANT = "admin_tenant"
"""Reserved tenant key that is always present in the access mapping."""

UNLIMITED = "UNLIMITED"


class CallerRole(StrEnum):
    """Role of an authenticated caller.

    Admins bypass all row filtering and are the only callers allowed to
    mutate customers.
    """

    ADMIN = "admin"
    USER = "user"


class AccessLevel(StrEnum):
    """SearchGuard tenant access levels."""

    READ_WRITE = "RW"


@dataclass(frozen=True)
class PermissionSet:
    """Identifiers a non-admin caller may see.

    Attributes:
        customers: Directly permitted customer ids
        projects: Project ids whose owning customer becomes visible
    """

    customers: frozenset[int] = frozenset()
    projects: frozenset[int] = frozenset()

    @classmethod
    def of(
        cls,
        customers: Iterable[int] = (),
        projects: Iterable[int] = (),
    ) -> PermissionSet:
        """Build a PermissionSet from any iterables of ids."""
        return cls(customers=frozenset(customers), projects=frozenset(projects))


@dataclass(frozen=True)
class CallerCredentials:
    """Pre-authenticated caller identity.

    Supplied by the transport layer; this core only authorizes.
    """

    role: CallerRole
    permissions: PermissionSet = field(default_factory=PermissionSet)

    @property
    def is_admin(self) -> bool:
        """Whether the caller bypasses row filtering."""
        return self.role == CallerRole.ADMIN


@dataclass(frozen=True)
class TenantAccessMapping:
    """Complete tenant key -> access level mapping for the index role.

    Always derived from the full set of customer names, never patched.
    """

    tenants: Mapping[str, AccessLevel]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tenants", MappingProxyType(dict(self.tenants)))

    @classmethod
    def from_customer_names(cls, names: Iterable[str]) -> TenantAccessMapping:
        """Map every customer name plus the admin tenant to read-write."""
        tenants: dict[str, AccessLevel] = {ADMIN_TENANT: AccessLevel.READ_WRITE}
        for name in names:
            tenants[name] = AccessLevel.READ_WRITE
        return cls(tenants=tenants)

    def as_dict(self) -> dict[str, str]:
        """Serialize to the JSON shape the index expects."""
        return {key: str(level) for key, level in sorted(self.tenants.items())}


@dataclass(frozen=True)
class RoleDefinition:
    """Body of a SearchGuard role: capability grants plus tenant mapping."""

    tenants: TenantAccessMapping
    cluster: tuple[str, ...] = (UNLIMITED,)
    indices: Mapping[str, Mapping[str, tuple[str, ...]]] = field(
        default_factory=lambda: {"*": {"*": (UNLIMITED,)}}
    )

    def to_body(self) -> dict[str, Any]:
        """Serialize to the roles API request body."""
        return {
            "cluster": list(self.cluster),
            "indices": {
                pattern: {doc_type: list(grants) for doc_type, grants in types.items()}
                for pattern, types in self.indices.items()
            },
            "tenants": self.tenants.as_dict(),
        }
