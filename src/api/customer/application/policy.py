"""Access policy evaluation for customer operations.

The evaluator holds no mutable state and never touches the store. It decides
whether an operation may proceed and, for reads, which row predicate to
apply over the columns it was configured with.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from sqlalchemy.sql.elements import ColumnElement

from customer.application.results import ErrorKind, OperationError
from customer.domain.value_objects import CustomerPatch
from customer.ports.repositories import VisibilityColumns
from shared_kernel.authorization.types import CallerCredentials
from shared_kernel.persistence import (
    filter_unless_admin,
    membership_clause,
    or_of_clauses,
    or_of_memberships,
    transitive_membership_clause,
)


class MutationKind(StrEnum):
    """Admin-only operations."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_ALL = "delete_all"
    RESYNC = "resync"


class ReadScope(StrEnum):
    """Shape of the query a read predicate is built for.

    CUSTOMER queries select from ``customer`` only; PROJECT queries join
    ``project`` to ``customer`` and may filter on project columns directly.
    """

    CUSTOMER = "customer"
    PROJECT = "project"


@dataclass(frozen=True)
class PolicyDecision:
    """Result of evaluating an operation against the caller's credentials."""

    allowed: bool
    error: OperationError | None = None
    predicate: ColumnElement[bool] | None = None

    @classmethod
    def allow(cls, predicate: ColumnElement[bool] | None = None) -> PolicyDecision:
        return cls(allowed=True, predicate=predicate)

    @classmethod
    def deny(cls, kind: ErrorKind, message: str) -> PolicyDecision:
        return cls(allowed=False, error=OperationError(kind=kind, message=message))


class AccessPolicyEvaluator:
    """Evaluates customer operations against caller role and permissions.

    Admins may do anything and read without restriction. Other callers may
    only read, and only customers they are granted directly or that own a
    project they are granted.
    """

    def __init__(self, columns: VisibilityColumns):
        """Initialize the evaluator.

        Args:
            columns: Store columns read predicates are built over
        """
        self._columns = columns

    def authorize_mutation(
        self,
        credentials: CallerCredentials,
        operation: MutationKind,
    ) -> PolicyDecision:
        """Allow ``operation`` only for admins."""
        if not credentials.is_admin:
            return PolicyDecision.deny(
                ErrorKind.AUTHORIZATION,
                f"Unauthorized: {operation} requires the admin role",
            )
        return PolicyDecision.allow()

    def authorize_read(
        self,
        credentials: CallerCredentials,
        scope: ReadScope = ReadScope.CUSTOMER,
    ) -> PolicyDecision:
        """Always allow reads, restricted by a predicate for non-admins."""
        return PolicyDecision.allow(
            filter_unless_admin(
                credentials.role,
                self._visibility_clause(credentials, scope),
            )
        )

    def validate_patch(self, patch: CustomerPatch) -> PolicyDecision:
        """Reject patches that change nothing."""
        if patch.is_empty():
            return PolicyDecision.deny(
                ErrorKind.VALIDATION,
                "input.patch requires at least 1 attribute",
            )
        return PolicyDecision.allow()

    def _visibility_clause(
        self,
        credentials: CallerCredentials,
        scope: ReadScope,
    ) -> ColumnElement[bool]:
        permissions = credentials.permissions
        columns = self._columns

        if scope == ReadScope.PROJECT:
            return or_of_memberships(
                [
                    (columns.customer_id, permissions.customers),
                    (columns.project_id, permissions.projects),
                ]
            )

        return or_of_clauses(
            [
                membership_clause(columns.customer_id, permissions.customers),
                transitive_membership_clause(
                    columns.customer_id,
                    owner_column=columns.project_customer,
                    key_column=columns.project_id,
                    ids=permissions.projects,
                ),
            ]
        )
