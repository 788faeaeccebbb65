"""Create environments table

Revision ID: 002
Revises: 001
Create Date: 2025-01-15 00:01:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op
from src.alembic.migration_utils import create_updated_at_trigger, drop_updated_at_trigger

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "environments",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("priority", sa.Integer(), nullable=False, server_default=sa.text("50")),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.PrimaryKeyConstraint("id", name="environments_pkey"),
        sa.UniqueConstraint("name", name="environments_name_key"),
        sa.UniqueConstraint("slug", name="environments_slug_key"),
        sa.CheckConstraint(
            "priority >= 0 AND priority <= 100", name="environments_priority_check"
        ),
    )
    op.create_index("idx_environments_name", "environments", ["name"])
    op.create_index("idx_environments_slug", "environments", ["slug"])
    op.create_index("idx_environments_active", "environments", ["active"])
    op.create_index("idx_environments_priority", "environments", ["priority"])
    op.create_index("idx_environments_created_at", "environments", ["created_at"])

    create_updated_at_trigger("environments")


def downgrade() -> None:
    drop_updated_at_trigger("environments")
    for index in (
        "idx_environments_created_at",
        "idx_environments_priority",
        "idx_environments_active",
        "idx_environments_slug",
        "idx_environments_name",
    ):
        op.drop_index(index, table_name="environments")
    op.drop_table("environments")
