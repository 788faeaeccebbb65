"""Operator commands for schema migrations and seed data.

Usage:
    config-service-migrate up
    config-service-migrate down [--steps N]
    config-service-migrate version
    config-service-migrate force VERSION
    config-service-migrate seed
"""

import argparse
import sys
from collections.abc import Sequence

from src.config_service.core.config import get_settings
from src.config_service.core.db import MigrationError, MigrationRunner, create_sync_engine
from src.config_service.core.logging import get_logger, setup_logging
from src.config_service.core.seed import seed_statements


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="config-service-migrate",
        description="Manage the config service database schema",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("up", help="Apply all pending migrations")
    down = sub.add_parser("down", help="Roll back applied migrations")
    down.add_argument("--steps", "-n", type=int, default=1, help="Number of migrations to undo")
    sub.add_parser("version", help="Show the current version and dirty flag")
    force = sub.add_parser(
        "force", help="Set the recorded version without running migrations (clears dirty)"
    )
    force.add_argument("version", type=int)
    sub.add_parser("seed", help="Insert default environments and tags if missing")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("config_service.migrations")

    if args.command == "seed":
        engine = create_sync_engine(settings)
        try:
            with engine.begin() as conn:
                for stmt in seed_statements():
                    conn.execute(stmt)
        finally:
            engine.dispose()
        logger.info("Seed data applied")
        return 0

    runner = MigrationRunner.from_settings(settings, logger)
    try:
        if args.command == "up":
            runner.up()
        elif args.command == "down":
            runner.down(args.steps)
        elif args.command == "force":
            runner.force_version(args.version)
        current = runner.version()
        print(f"version={current.version} dirty={str(current.dirty).lower()}")
    except (MigrationError, ValueError) as e:
        logger.error("Migration command failed", command=args.command, error=str(e))
        return 1
    finally:
        runner.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
