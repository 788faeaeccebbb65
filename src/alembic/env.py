import os
from logging.config import fileConfig
from typing import Any

from sqlalchemy import Connection, create_engine, pool
from sqlmodel import SQLModel

from alembic import context
from src.config_service.core.config import get_settings
from src.config_service.core.db.migrations import STATE_TABLE

# Registers every table on SQLModel.metadata
from src.config_service.models import Environment, Tag, Template, TemplateTag  # noqa: F401

config = context.config

if config.config_file_name is not None and os.path.exists(config.config_file_name):
    fileConfig(config.config_file_name)

target_metadata = SQLModel.metadata


def get_url() -> str:
    """Sync database URL: the runner's explicit URL, else the settings."""
    return config.get_main_option("sqlalchemy.url") or get_settings().sync_database_url


def include_object(obj, name, type_, reflected, compare_to) -> bool:
    """Keep the runner's dirty-flag table out of autogenerate comparisons."""
    return not (type_ == "table" and name == STATE_TABLE)


def _options(**overrides: Any) -> dict[str, Any]:
    return {"target_metadata": target_metadata, "include_object": include_object, **overrides}


def run_migrations_offline() -> None:
    """Emit SQL to stdout instead of executing it."""
    context.configure(
        **_options(url=get_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    )
    with context.begin_transaction():
        context.run_migrations()


def _migrate(connection: Connection) -> None:
    context.configure(**_options(connection=connection, compare_type=True))
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Migrate over the runner's connection when given one, else a fresh engine.

    The runner opens that connection inside one transaction, so a failing
    revision rolls back every revision applied with it.
    """
    shared = config.attributes.get("connection")
    if shared is not None:
        _migrate(shared)
        return

    engine = create_engine(get_url(), poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            _migrate(connection)
            connection.commit()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
