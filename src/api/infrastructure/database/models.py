"""Declarative base shared by the customer ORM models."""

from __future__ import annotations

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Constraint names must match the Alembic migration; the repository detects
# duplicate names by looking for "uq_customer_name" in IntegrityError text.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for ORM models; carries the constraint naming convention."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
