"""Persistence primitives shared by permission-filtered repositories."""

from shared_kernel.persistence.predicates import (
    and_of_clauses,
    filter_unless_admin,
    membership_clause,
    or_of_clauses,
    or_of_memberships,
    transitive_membership_clause,
)

__all__ = [
    "and_of_clauses",
    "filter_unless_admin",
    "membership_clause",
    "or_of_clauses",
    "or_of_memberships",
    "transitive_membership_clause",
]
