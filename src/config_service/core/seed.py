"""Default environments and tags present on every installation."""

from typing import Any, Final

from sqlalchemy import column, table
from sqlalchemy.dialects.postgresql import Insert, insert
from sqlalchemy.ext.asyncio import AsyncSession

DEFAULT_ENVIRONMENTS: Final[list[dict[str, Any]]] = [
    {
        "name": "Development",
        "slug": "dev",
        "description": "Development environment for testing new features",
        "active": True,
        "priority": 10,
    },
    {
        "name": "Staging",
        "slug": "staging",
        "description": "Staging environment for pre-production testing",
        "active": True,
        "priority": 50,
    },
    {
        "name": "Production",
        "slug": "prod",
        "description": "Production environment for live applications",
        "active": True,
        "priority": 90,
    },
]

DEFAULT_TAGS: Final[list[dict[str, Any]]] = [
    {"name": "database", "description": "Database configuration templates", "color": "#3b82f6"},
    {"name": "api", "description": "API service configuration templates", "color": "#10b981"},
    {"name": "monitoring", "description": "Monitoring and observability configs", "color": "#f59e0b"},
    {"name": "security", "description": "Security and authentication configs", "color": "#ef4444"},
]

# Lightweight table clauses so migrations don't depend on the ORM models
_environments = table(
    "environments",
    column("name"),
    column("slug"),
    column("description"),
    column("active"),
    column("priority"),
)
_tags = table("tags", column("name"), column("description"), column("color"))


def seed_statements() -> list[Insert]:
    """INSERT ... ON CONFLICT DO NOTHING statements for all default rows."""
    return [
        insert(_environments).values(DEFAULT_ENVIRONMENTS).on_conflict_do_nothing(),
        insert(_tags).values(DEFAULT_TAGS).on_conflict_do_nothing(),
    ]


async def seed_defaults(session: AsyncSession) -> None:
    """Insert any missing default rows. Existing rows are left untouched."""
    for stmt in seed_statements():
        await session.execute(stmt)
    await session.commit()
