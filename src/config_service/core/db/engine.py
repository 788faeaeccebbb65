"""Database engine construction."""

import ssl
from typing import Any

from sqlalchemy import Engine, create_engine
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from src.config_service.core.config import Settings


def _get_connect_args(settings: Settings) -> dict[str, Any]:
    """Get asyncpg connection arguments including SSL configuration."""
    connect_args: dict[str, Any] = {}

    ssl_mode = settings.database_ssl_mode
    if ssl_mode != "disable":
        ssl_context = ssl.create_default_context()
        if ssl_mode == "prefer" or ssl_mode == "require":
            ssl_context.check_hostname = False
            ssl_context.verify_mode = ssl.CERT_NONE
        elif ssl_mode in ("verify-ca", "verify-full"):
            ssl_context.check_hostname = ssl_mode == "verify-full"
            ssl_context.verify_mode = ssl.CERT_REQUIRED
        connect_args["ssl"] = ssl_context

    return connect_args


def pool_options(settings: Settings) -> dict[str, Any]:
    """Map max open/idle/lifetime settings onto SQLAlchemy's QueuePool."""
    pool_size = max(1, min(settings.database_max_idle_conns, settings.database_max_open_conns))
    return {
        "pool_size": pool_size,
        "max_overflow": max(0, settings.database_max_open_conns - pool_size),
        "pool_recycle": settings.database_conn_max_lifetime,
        "pool_pre_ping": True,
    }


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """Create the application's pooled async engine (asyncpg)."""
    return create_async_engine(
        settings.async_database_url,
        connect_args=_get_connect_args(settings),
        **pool_options(settings),
    )


def create_sync_engine(settings: Settings) -> Engine:
    """Create a synchronous engine (psycopg2) for migrations and the CLI."""
    connect_args: dict[str, Any] = {}
    if settings.database_ssl_mode != "disable":
        connect_args["sslmode"] = settings.database_ssl_mode
    return create_engine(settings.sync_database_url, pool_pre_ping=True, connect_args=connect_args)
