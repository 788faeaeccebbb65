"""Create config_format enum, templates and template_tags

Revision ID: 003
Revises: 002
Create Date: 2025-01-15 00:02:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op
from src.alembic.migration_utils import create_updated_at_trigger, drop_updated_at_trigger

revision: str = "003"
down_revision: str | None = "002"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

config_format = postgresql.ENUM("json", "yaml", "toml", "env", name="config_format")


def upgrade() -> None:
    config_format.create(op.get_bind(), checkfirst=True)

    # json rather than jsonb: documents keep their key order byte for byte
    op.create_table(
        "templates",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.String(length=1000), nullable=False, server_default=""),
        sa.Column(
            "format",
            postgresql.ENUM(name="config_format", create_type=False),
            nullable=False,
            server_default="json",
        ),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("schema", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("default_values", sa.JSON(), nullable=False, server_default=sa.text("'{}'")),
        sa.Column("version", sa.String(length=50), nullable=False),
        sa.Column("environment_id", sa.BigInteger(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
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
        sa.Column("created_by", sa.String(length=100), nullable=False),
        sa.Column("updated_by", sa.String(length=100), nullable=False),
        sa.PrimaryKeyConstraint("id", name="templates_pkey"),
        sa.ForeignKeyConstraint(
            ["environment_id"],
            ["environments.id"],
            name="templates_environment_id_fkey",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("name", "environment_id", name="templates_name_environment_id_key"),
    )

    op.create_table(
        "template_tags",
        sa.Column("template_id", sa.BigInteger(), nullable=False),
        sa.Column("tag_id", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("template_id", "tag_id", name="template_tags_pkey"),
        sa.ForeignKeyConstraint(
            ["template_id"],
            ["templates.id"],
            name="template_tags_template_id_fkey",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"],
            ["tags.id"],
            name="template_tags_tag_id_fkey",
            ondelete="CASCADE",
        ),
    )

    for column in (
        "name",
        "environment_id",
        "format",
        "version",
        "active",
        "created_at",
        "created_by",
    ):
        op.create_index(f"idx_templates_{column}", "templates", [column])
    op.create_index("idx_template_tags_template_id", "template_tags", ["template_id"])
    op.create_index("idx_template_tags_tag_id", "template_tags", ["tag_id"])

    create_updated_at_trigger("templates")


def downgrade() -> None:
    drop_updated_at_trigger("templates")
    op.drop_table("template_tags")
    op.drop_table("templates")
    config_format.drop(op.get_bind(), checkfirst=True)
