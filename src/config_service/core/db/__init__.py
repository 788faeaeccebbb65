"""Database utilities - engine, session, migrations."""

from src.config_service.core.db.engine import (
    create_engine_from_settings,
    create_sync_engine,
    pool_options,
)
from src.config_service.core.db.errors import translate_integrity_error
from src.config_service.core.db.migrations import (
    DirtyMigrationError,
    MigrationError,
    MigrationRunner,
    MigrationVersion,
    PendingMigrationError,
    check_migrations_async,
    check_migrations_sync,
    run_migrations_async,
    run_migrations_sync,
)
from src.config_service.core.db.session import (
    SessionFactory,
    create_session_factory,
    get_session,
)

__all__ = [
    # Engine
    "create_engine_from_settings",
    "create_sync_engine",
    "pool_options",
    # Errors
    "translate_integrity_error",
    # Migrations
    "DirtyMigrationError",
    "MigrationError",
    "MigrationRunner",
    "MigrationVersion",
    "PendingMigrationError",
    "check_migrations_async",
    "check_migrations_sync",
    "run_migrations_async",
    "run_migrations_sync",
    # Session
    "SessionFactory",
    "create_session_factory",
    "get_session",
]
