"""create_customer_and_project_tables

Create the customer and project tables plus the create_customer and
delete_customer procedures used by the customer repository.

Revision ID: 3f1c9a7d2b4e
Revises:
Create Date: 2026-10-18 09:12:40.118204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b4e"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "customer",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("comment", sa.Text(), nullable=True),
        sa.Column("private_key", sa.String(length=5000), nullable=True),
        sa.Column(
            "created",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_customer"),
        sa.UniqueConstraint("name", name="uq_customer_name"),
    )

    op.create_table(
        "project",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("customer", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["customer"],
            ["customer.id"],
            name="fk_project_customer_customer",
            ondelete="RESTRICT",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_project"),
        sa.UniqueConstraint("name", name="uq_project_name"),
    )
    op.create_index("ix_project_customer", "project", ["customer"], unique=False)

    # Caller-supplied ids advance the sequence so later generated ids never collide
    op.execute("""
        CREATE OR REPLACE PROCEDURE create_customer(
            p_id integer,
            p_name varchar,
            p_comment text,
            p_private_key varchar
        )
        LANGUAGE plpgsql
        AS $$
        BEGIN
            IF p_id IS NULL THEN
                INSERT INTO customer (name, comment, private_key)
                VALUES (p_name, p_comment, p_private_key);
            ELSE
                INSERT INTO customer (id, name, comment, private_key)
                VALUES (p_id, p_name, p_comment, p_private_key);
                PERFORM setval(
                    pg_get_serial_sequence('customer', 'id'),
                    GREATEST(p_id, (SELECT last_value FROM customer_id_seq))
                );
            END IF;
        END;
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE PROCEDURE delete_customer(p_name varchar)
        LANGUAGE plpgsql
        AS $$
        BEGIN
            DELETE FROM customer WHERE name = p_name;
        END;
        $$;
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP PROCEDURE IF EXISTS delete_customer(varchar);")
    op.execute("DROP PROCEDURE IF EXISTS create_customer(integer, varchar, text, varchar);")
    op.drop_index("ix_project_customer", table_name="project")
    op.drop_table("project")
    op.drop_table("customer")
