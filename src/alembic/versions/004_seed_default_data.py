"""Seed default environments and tags

Revision ID: 004
Revises: 003
Create Date: 2025-01-15 00:03:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op
from src.config_service.core.seed import DEFAULT_ENVIRONMENTS, DEFAULT_TAGS, seed_statements

revision: str = "004"
down_revision: str | None = "003"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    for stmt in seed_statements():
        op.execute(stmt)


def downgrade() -> None:
    # Cascades remove any templates created in the default environments
    op.execute(
        sa.text("DELETE FROM environments WHERE slug IN :slugs").bindparams(
            sa.bindparam("slugs", [e["slug"] for e in DEFAULT_ENVIRONMENTS], expanding=True)
        )
    )
    op.execute(
        sa.text("DELETE FROM tags WHERE name IN :names").bindparams(
            sa.bindparam("names", [t["name"] for t in DEFAULT_TAGS], expanding=True)
        )
    )
