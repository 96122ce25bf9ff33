"""SQLAlchemy ORM models for the customer and project tables.

Customers are the tenancy unit; projects belong to a customer and grant
transitive visibility of it.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from customer.ports.repositories import VisibilityColumns
from infrastructure.database.models import Base


class CustomerModel(Base):
    """ORM model for the customer table.

    Note: Customer names are globally unique because they are used as tenant
    keys in the external index.
    """

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    private_key: Mapped[str | None] = mapped_column(String(5000), nullable=True)
    created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CustomerModel(id={self.id}, name={self.name})>"


class ProjectModel(Base):
    """ORM model for the project table (visibility path only)."""

    __tablename__ = "project"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    customer: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customer.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ProjectModel(id={self.id}, customer={self.customer})>"


VISIBILITY_COLUMNS = VisibilityColumns(
    customer_id=CustomerModel.__table__.c.id,
    project_id=ProjectModel.__table__.c.id,
    project_customer=ProjectModel.__table__.c.customer,
)
