"""Row-filter predicate builder for permission-scoped queries.

Every function here is pure and returns SQLAlchemy Core boolean expressions.
Column and table identifiers are passed in as ``ColumnElement`` objects owned
by the calling repository; identifier values (customer ids, project ids, ...)
are always rendered as bound parameters by SQLAlchemy and never interpolated
into the statement text.

``None`` is the empty fragment: it means "no restriction" and callers must not
add a WHERE clause for it.
"""

from __future__ import annotations

from typing import Any, Collection, Iterable

from sqlalchemy import and_, false, or_, select
from sqlalchemy.sql.elements import ColumnElement

from shared_kernel.authorization.types import CallerRole

Clause = ColumnElement[bool]


def filter_unless_admin(role: CallerRole, clause: Clause | None) -> Clause | None:
    """Return the empty fragment for admins, the clause otherwise."""
    if role == CallerRole.ADMIN:
        return None
    return clause


def membership_clause(column: ColumnElement[Any], ids: Collection[Any]) -> Clause:
    """Assert that ``column`` is one of ``ids``.

    An empty collection yields a literal FALSE so that the clause matches no
    rows on every engine, instead of an ``IN ()`` with engine-specific meaning.
    """
    if not ids:
        return false()
    return column.in_(sorted(ids))


def transitive_membership_clause(
    column: ColumnElement[Any],
    owner_column: ColumnElement[Any],
    key_column: ColumnElement[Any],
    ids: Collection[Any],
) -> Clause:
    """Assert that ``column`` owns a related row whose key is one of ``ids``.

    Renders ``column IN (SELECT owner_column WHERE key_column IN (:ids))``. Used
    when a row is visible through a related resource that the query itself
    does not join.
    """
    if not ids:
        return false()
    owners = select(owner_column).where(membership_clause(key_column, ids))
    return column.in_(owners.scalar_subquery())


def or_of_clauses(clauses: Iterable[Clause]) -> Clause:
    """OR together prebuilt clauses; no clauses matches no rows."""
    clauses = list(clauses)
    if not clauses:
        return false()
    if len(clauses) == 1:
        return clauses[0]
    return or_(*clauses)


def or_of_memberships(
    memberships: Iterable[tuple[ColumnElement[Any], Collection[Any]]],
) -> Clause:
    """OR of one membership clause per ``(column, ids)`` pair.

    Used when a row is reachable either directly (by its own id) or
    transitively (by the id of a joined related row).
    """
    return or_of_clauses(
        membership_clause(column, ids) for column, ids in memberships
    )


def and_of_clauses(clauses: Iterable[Clause | None]) -> Clause | None:
    """AND together the non-empty fragments.

    Returns None when every fragment is empty, so callers never emit a
    dangling AND or a WHERE without a predicate.
    """
    present = [clause for clause in clauses if clause is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return and_(*present)
