"""Integration test fixtures for database and HTTP client operations.

These fixtures require a reachable PostgreSQL database; tests are skipped when
it is down. Redis is replaced by fakeredis.
"""

import asyncio
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool

from src.config_service.core.config import get_settings
from src.config_service.core.db import create_session_factory, run_migrations_sync
from src.config_service.core.health import HealthChecker
from src.config_service.core.seed import DEFAULT_ENVIRONMENTS, DEFAULT_TAGS
from src.config_service.main import create_app

_SEED_SLUGS = [env["slug"] for env in DEFAULT_ENVIRONMENTS]
_SEED_TAGS = [tag["name"] for tag in DEFAULT_TAGS]


async def cleanup_rows(engine: AsyncEngine) -> None:
    """Delete everything but the seeded defaults. Junction rows go with their parents."""
    async with engine.begin() as conn:
        await conn.execute(text("DELETE FROM templates"))
        await conn.execute(
            text("DELETE FROM environments WHERE slug <> ALL(:slugs)"), {"slugs": _SEED_SLUGS}
        )
        await conn.execute(text("DELETE FROM tags WHERE name <> ALL(:names)"), {"names": _SEED_TAGS})


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and ensure migrations are applied."""
    settings = get_settings()
    test_engine = create_async_engine(settings.async_database_url, poolclass=NullPool)
    try:
        async with test_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (OperationalError, DBAPIError, OSError) as exc:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL unavailable: {type(exc).__name__}")

    await asyncio.to_thread(run_migrations_sync, settings)
    await cleanup_rows(test_engine)

    yield test_engine

    await cleanup_rows(test_engine)
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for direct database assertions.

    The session does not auto-commit; call ``await session.commit()`` to persist.
    """
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def app(engine: AsyncEngine) -> AsyncGenerator[FastAPI]:
    """Application wired to the real database and an in-memory Redis."""
    redis = fakeredis_aio.FakeRedis(decode_responses=True)
    application = create_app()
    application.state.engine = engine
    application.state.session_factory = create_session_factory(engine)
    application.state.redis = redis
    application.state.health_checker = HealthChecker(engine, redis, get_settings().app_version)
    yield application
    await redis.aclose()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac
