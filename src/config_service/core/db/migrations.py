"""Versioned schema migrations on top of Alembic.

Revisions are numbered ("001", "002", ...) and the numeric part is the schema
version. Alongside Alembic's own version table the runner keeps a dirty flag in
``schema_migration_state``: it is raised before a run and lowered only after
the run succeeded, so a crash or failed migration leaves it set and every later
``up``/``down`` refuses to touch the schema until an operator calls
``force_version``.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import structlog
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import (
    Boolean,
    Column,
    Connection,
    DateTime,
    Engine,
    Integer,
    MetaData,
    Table,
    create_engine,
    func,
    inspect,
    select,
    update,
)
from sqlalchemy.pool import NullPool

from alembic import command
from src.config_service.core.config import Settings
from src.config_service.core.logging import get_logger

STATE_TABLE = "schema_migration_state"
_STATE_ROW_ID = 1

migration_state = Table(
    STATE_TABLE,
    MetaData(),
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("dirty", Boolean, nullable=False, default=False),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=func.current_timestamp(),
    ),
)


class MigrationError(Exception):
    """A migration could not be applied or rolled back."""


class DirtyMigrationError(MigrationError):
    """A previous run failed partway; the schema state is unknown."""

    def __init__(self, version: int):
        super().__init__(
            f"Database is in a dirty state at version {version}. "
            "Fix the schema manually, then run force_version."
        )
        self.version = version


class PendingMigrationError(MigrationError):
    """The schema is behind and auto-migration is disabled."""

    def __init__(self, version: int, pending: list[int]):
        super().__init__(
            f"Database is at version {version} with unapplied migrations {pending}. "
            "Run the migrate command or enable auto-migration."
        )
        self.version = version
        self.pending = pending


@dataclass(frozen=True)
class MigrationVersion:
    version: int
    dirty: bool


def _revision_number(revision: str) -> int:
    try:
        return int(revision)
    except ValueError as e:
        raise MigrationError(f"Revision id {revision!r} is not a version number") from e


class MigrationRunner:
    """Apply, roll back and inspect schema versions.

    Args:
        database_url: Synchronous SQLAlchemy URL (psycopg2, or SQLite in tests).
        script_location: Directory holding env.py and versions/.
        logger: Logger to report progress on.
        engine: Existing engine to use instead of creating one from the URL.
    """

    def __init__(
        self,
        database_url: str,
        script_location: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        *,
        engine: Engine | None = None,
    ):
        self.database_url = database_url
        self.script_location = script_location
        self.logger = logger or get_logger(__name__)
        self._owns_engine = engine is None
        self.engine = engine or create_engine(database_url, poolclass=NullPool)
        self.config = Config()
        self.config.set_main_option("script_location", script_location)
        self.config.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
        self.script = ScriptDirectory.from_config(self.config)

    @classmethod
    def from_settings(
        cls, settings: Settings, logger: structlog.stdlib.BoundLogger | None = None
    ) -> "MigrationRunner":
        connect_args: dict[str, Any] = {}
        if settings.database_ssl_mode != "disable":
            connect_args["sslmode"] = settings.database_ssl_mode
        engine = create_engine(
            settings.sync_database_url, poolclass=NullPool, connect_args=connect_args
        )
        runner = cls(
            settings.sync_database_url,
            settings.database_migrations_path,
            logger,
            engine=engine,
        )
        runner._owns_engine = True
        return runner

    def dispose(self) -> None:
        if self._owns_engine:
            self.engine.dispose()

    # Revision bookkeeping

    def revisions(self) -> list[str]:
        """All revision ids, oldest first."""
        return [rev.revision for rev in reversed(list(self.script.walk_revisions()))]

    def _current_revision(self, conn: Connection) -> str | None:
        return MigrationContext.configure(conn).get_current_revision()

    def _read_dirty(self, conn: Connection) -> bool:
        if not inspect(conn).has_table(STATE_TABLE):
            return False
        dirty = conn.scalar(
            select(migration_state.c.dirty).where(migration_state.c.id == _STATE_ROW_ID)
        )
        return bool(dirty)

    def _set_dirty(self, dirty: bool) -> None:
        with self.engine.begin() as conn:
            migration_state.create(conn, checkfirst=True)
            result = conn.execute(
                update(migration_state)
                .where(migration_state.c.id == _STATE_ROW_ID)
                .values(dirty=dirty, updated_at=func.current_timestamp())
            )
            if result.rowcount == 0:
                conn.execute(migration_state.insert().values(id=_STATE_ROW_ID, dirty=dirty))

    def _run(self, action: str, fn: Any, *args: Any, **kwargs: Any) -> None:
        """Run an alembic command on one shared connection with the dirty flag raised."""
        self._set_dirty(True)
        try:
            with self.engine.begin() as conn:
                self.config.attributes["connection"] = conn
                fn(self.config, *args, **kwargs)
        except Exception as e:
            self.logger.error("Migration failed", action=action, error=str(e))
            raise MigrationError(f"Migration {action} failed: {e}") from e
        finally:
            self.config.attributes.pop("connection", None)
        self._set_dirty(False)

    # Operations

    def version(self) -> MigrationVersion:
        """Current schema version (0 when nothing is applied) and dirty flag."""
        with self.engine.connect() as conn:
            current = self._current_revision(conn)
            dirty = self._read_dirty(conn)
        return MigrationVersion(
            version=_revision_number(current) if current else 0,
            dirty=dirty,
        )

    def pending(self) -> list[int]:
        """Versions not yet applied, in the order they would run."""
        with self.engine.connect() as conn:
            current = self._current_revision(conn)
        revisions = self.revisions()
        start = revisions.index(current) + 1 if current else 0
        return [_revision_number(rev) for rev in revisions[start:]]

    def up(self) -> bool:
        """Apply all pending migrations.

        Returns:
            True if anything was applied, False if already at the latest version.

        Raises:
            DirtyMigrationError: A previous run failed; nothing is executed.
            MigrationError: A migration failed; the dirty flag stays set.
        """
        current = self.version()
        if current.dirty:
            raise DirtyMigrationError(current.version)

        pending = self.pending()
        if not pending:
            self.logger.info("No new migrations to apply", version=current.version)
            return False

        self.logger.info("Applying migrations", version=current.version, pending=pending)
        self._run("up", command.upgrade, "head")
        self.logger.info("Migrations applied", version=pending[-1])
        return True

    def down(self, n: int = 1) -> None:
        """Roll back the last ``n`` applied migrations, newest first."""
        if n < 1:
            raise ValueError("n must be at least 1")

        current = self.version()
        if current.dirty:
            raise DirtyMigrationError(current.version)

        with self.engine.connect() as conn:
            current_rev = self._current_revision(conn)
        revisions = self.revisions()
        applied = revisions.index(current_rev) + 1 if current_rev else 0
        if n > applied:
            raise MigrationError(
                f"Cannot roll back {n} migration(s): only {applied} applied"
            )

        target_index = applied - n
        target = revisions[target_index - 1] if target_index > 0 else "base"
        self.logger.info("Rolling back migrations", version=current.version, steps=n)
        self._run("down", command.downgrade, target)
        self.logger.info(
            "Migrations rolled back",
            version=_revision_number(target) if target != "base" else 0,
        )

    def force_version(self, version: int) -> None:
        """Record ``version`` as applied without running any migration body.

        Clears the dirty flag. Use only after repairing the schema by hand.
        """
        if version < 0:
            raise ValueError("version must be non-negative")
        if version == 0:
            target = "base"
        else:
            matches = [rev for rev in self.revisions() if _revision_number(rev) == version]
            if not matches:
                raise MigrationError(f"Unknown migration version {version}")
            target = matches[0]

        self.logger.warning(
            "Forcing migration version, migration bodies are NOT executed",
            version=version,
        )
        with self.engine.begin() as conn:
            self.config.attributes["connection"] = conn
            try:
                command.stamp(self.config, target, purge=True)
            finally:
                self.config.attributes.pop("connection", None)
        self._set_dirty(False)


def run_migrations_sync(
    settings: Settings, logger: structlog.stdlib.BoundLogger | None = None
) -> bool:
    """Bring the schema to the latest version. Returns True if anything ran."""
    runner = MigrationRunner.from_settings(settings, logger)
    try:
        return runner.up()
    finally:
        runner.dispose()


def check_migrations_sync(
    settings: Settings, logger: structlog.stdlib.BoundLogger | None = None
) -> MigrationVersion:
    """Verify the schema is current without changing it, for when auto-migration is off.

    Raises:
        DirtyMigrationError: A previous run failed partway.
        PendingMigrationError: Revisions exist that were never applied.
    """
    runner = MigrationRunner.from_settings(settings, logger)
    try:
        current = runner.version()
        if current.dirty:
            raise DirtyMigrationError(current.version)
        pending = runner.pending()
        if pending:
            runner.logger.error(
                "Schema is behind, auto-migration is disabled",
                version=current.version,
                pending=pending,
            )
            raise PendingMigrationError(current.version, pending)
        return current
    finally:
        runner.dispose()


async def run_migrations_async(
    settings: Settings, logger: structlog.stdlib.BoundLogger | None = None
) -> bool:
    """Run migrations from async context.

    Uses ThreadPoolExecutor to avoid event loop conflicts with Alembic.
    """
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=1) as pool:
        return await loop.run_in_executor(pool, run_migrations_sync, settings, logger)


async def check_migrations_async(
    settings: Settings, logger: structlog.stdlib.BoundLogger | None = None
) -> MigrationVersion:
    loop = asyncio.get_running_loop()
    with ThreadPoolExecutor(max_workers=1) as pool:
        return await loop.run_in_executor(pool, check_migrations_sync, settings, logger)
