"""Root test fixtures shared across all test types.

This conftest contains fixtures that can be used by both unit and integration tests.
Database-specific fixtures are in tests/integration/conftest.py.
"""

import os

os.environ.setdefault("APP_ENV", "testing")
# Disable SSL for local test database (PostgreSQL without SSL support)
os.environ.setdefault("DATABASE_SSL_MODE", "disable")
# Startup migrations are driven by the integration fixtures, never by imports
os.environ.setdefault("DATABASE_AUTO_MIGRATE", "false")

# ruff: noqa: E402 - Imports must be after env var setup
from collections.abc import AsyncGenerator

import pytest
from fakeredis import aioredis as fakeredis_aio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from redis.asyncio import Redis

from src.config_service.core.config import get_settings
from src.config_service.core.health import HealthChecker
from src.config_service.main import create_app
from tests.helpers import FakeEngine

# Clear settings cache to ensure test environment variables are picked up
get_settings.cache_clear()


# --- Redis Test Fixtures (shared) ---


@pytest.fixture
async def fake_redis() -> AsyncGenerator[Redis]:
    """Provides a fakeredis client for testing.

    Returns an in-memory Redis implementation that behaves like
    a real Redis server but doesn't require external dependencies.
    """
    client = fakeredis_aio.FakeRedis(decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def health_checker(fake_engine: FakeEngine, fake_redis: Redis) -> HealthChecker:
    return HealthChecker(fake_engine, fake_redis, "1.0.0", timeout=0.5, readiness_timeout=0.5)  # type: ignore[arg-type]


# --- App Fixtures ---


@pytest.fixture
def app(health_checker: HealthChecker) -> FastAPI:
    """Application without lifespan: state is wired by hand, services are overridden per test."""
    application = create_app()
    application.state.health_checker = health_checker
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """HTTP client that renders unhandled errors as responses instead of raising."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
