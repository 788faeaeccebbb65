"""Domain metrics for configuration entities.

HTTP request metrics come from prometheus-fastapi-instrumentator; these
collectors are registered on the default registry and scraped from the same
endpoint.
"""

import asyncio
import contextlib

import structlog
from prometheus_client import Counter, Gauge, Histogram
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import Pool, QueuePool

from src.config_service.core.logging import get_logger
from src.config_service.models import Environment, Template

TEMPLATE_OPERATIONS = Counter(
    "config_template_operations_total",
    "Total number of configuration template operations",
    ["operation", "environment", "status"],
)

TEMPLATE_SIZE = Histogram(
    "config_template_size_bytes",
    "Size of configuration template content in bytes",
    ["format"],
    buckets=(100, 500, 1_000, 5_000, 10_000, 50_000, 100_000, 500_000),
)

ENTITY_OPERATIONS = Counter(
    "config_entity_operations_total",
    "Total number of tag and environment operations",
    ["entity", "operation", "status"],
)


def record_template_operation(operation: str, environment: str, status: str) -> None:
    TEMPLATE_OPERATIONS.labels(operation=operation, environment=environment, status=status).inc()


def observe_template_size(fmt: str, content: str) -> None:
    TEMPLATE_SIZE.labels(format=fmt).observe(len(content.encode("utf-8")))


def record_entity_operation(entity: str, operation: str, status: str) -> None:
    ENTITY_OPERATIONS.labels(entity=entity, operation=operation, status=status).inc()


DATABASE_CONNECTIONS = Gauge(
    "database_connections",
    "Number of database connections by state",
    ["state"],
)

TEMPLATES_TOTAL = Gauge(
    "config_templates_total",
    "Total number of configuration templates",
    ["environment", "format", "active"],
)


def update_pool_metrics(pool: Pool) -> None:
    """Copy connection counts from a queue pool. Other pool classes keep no stats."""
    if not isinstance(pool, QueuePool):
        return
    idle = pool.checkedin()
    in_use = pool.checkedout()
    DATABASE_CONNECTIONS.labels(state="open").set(idle + in_use)
    DATABASE_CONNECTIONS.labels(state="idle").set(idle)
    DATABASE_CONNECTIONS.labels(state="in_use").set(in_use)


async def refresh_template_counts(session: AsyncSession) -> None:
    """Recount templates per environment, format and active flag.

    Series for combinations that no longer exist are dropped.
    """
    result = await session.execute(
        select(Environment.slug, Template.format, Template.active, func.count(Template.id))
        .join(Environment, Template.environment_id == Environment.id)
        .group_by(Environment.slug, Template.format, Template.active)
    )
    rows = result.all()
    TEMPLATES_TOTAL.clear()
    for slug, fmt, active, count in rows:
        TEMPLATES_TOTAL.labels(
            environment=slug, format=fmt.value, active=str(active).lower()
        ).set(count)


class MetricsRefresher:
    """Keeps the pool and template gauges current from a background task.

    Started and stopped by the application lifespan.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        session_factory: async_sessionmaker[AsyncSession],
        interval: float,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self.engine = engine
        self.session_factory = session_factory
        self.interval = interval
        self.logger = logger or get_logger(__name__)
        self._task: asyncio.Task[None] | None = None

    async def refresh(self) -> None:
        update_pool_metrics(self.engine.pool)
        async with self.session_factory() as session:
            await refresh_template_counts(session)

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except (SQLAlchemyError, OSError) as e:
                # Gauges keep their last values until the store is back
                self.logger.warning("Metrics refresh failed", error=type(e).__name__)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="metrics-refresh")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
