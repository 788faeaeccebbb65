"""Dependency health checks and the /health, /ready and /live endpoints."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config_service.core.config import Settings
from src.config_service.core.exceptions import error_body
from src.config_service.core.logging import get_logger
from src.config_service.schemas.health import HealthReport, MessageResponse, ServiceHealth

HEALTH_PATHS = ("/health", "/ready", "/live")

Probe = Callable[[], Awaitable[object]]


class HealthChecker:
    """Probes the database and Redis, each bounded by its own timeout.

    Args:
        engine: Application database engine.
        redis: Application Redis client.
        version: Service version reported by ``health()``.
        logger: Logger for probe failures.
        timeout: Per-dependency timeout for ``health()`` in seconds.
        readiness_timeout: Per-dependency timeout for ``readiness()`` in seconds.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        redis: Redis,
        version: str,
        logger: structlog.stdlib.BoundLogger | None = None,
        timeout: float = 5.0,
        readiness_timeout: float = 3.0,
    ):
        self.engine = engine
        self.redis = redis
        self.version = version
        self.logger = logger or get_logger(__name__)
        self.timeout = timeout
        self.readiness_timeout = readiness_timeout

    async def _ping_database(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def _ping_redis(self) -> None:
        await self.redis.ping()

    async def _probe(self, name: str, label: str, probe: Probe, timeout: float) -> ServiceHealth:
        start = time.perf_counter()
        try:
            await asyncio.wait_for(probe(), timeout=timeout)
        except TimeoutError:
            status, message = "unhealthy", f"{label} check timed out after {timeout:g}s"
            self.logger.warning("Health check timed out", service=name, timeout=timeout)
        except Exception as e:
            status, message = "unhealthy", f"{label} check failed: {type(e).__name__}"
            self.logger.warning("Health check failed", service=name, error=str(e))
        else:
            status, message = "healthy", f"{label} connection is healthy"
        latency_ms = (time.perf_counter() - start) * 1000
        return ServiceHealth(
            status=status,
            message=message,
            latency=round(latency_ms, 3),
            last_check=datetime.now(UTC).isoformat(),
        )

    async def _check_all(self, timeout: float) -> dict[str, ServiceHealth]:
        database, redis = await asyncio.gather(
            self._probe("database", "Database", self._ping_database, timeout),
            self._probe("redis", "Redis", self._ping_redis, timeout),
        )
        return {"database": database, "redis": redis}

    async def health(self) -> HealthReport:
        """Per-dependency status; overall unhealthy if any dependency is."""
        services = await self._check_all(self.timeout)
        healthy = all(s.status == "healthy" for s in services.values())
        return HealthReport(
            status="healthy" if healthy else "unhealthy",
            version=self.version,
            services=services,
        )

    async def readiness(self) -> bool:
        services = await self._check_all(self.readiness_timeout)
        return all(s.status == "healthy" for s in services.values())

    async def liveness(self) -> bool:
        # Never touches dependencies: a dependency outage must not restart the process
        return True


def setup_health_endpoints(app: FastAPI) -> None:
    """Register /health, /ready and /live.

    The checker and request tracker are read from ``app.state`` at request time.
    """

    @app.get("/health", tags=["health"], response_model=HealthReport)
    async def health(request: Request) -> JSONResponse:
        """Detailed dependency health. 503 when any dependency is unhealthy."""
        report = await request.app.state.health_checker.health()
        status_code = 200 if report.status == "healthy" else 503
        return JSONResponse(content=report.model_dump(mode="json"), status_code=status_code)

    @app.get("/ready", tags=["health"], response_model=MessageResponse)
    async def ready(request: Request) -> JSONResponse:
        """Readiness probe for orchestrators. No per-dependency detail."""
        tracker = request.app.state.request_tracker
        if tracker.is_shutting_down:
            return JSONResponse(
                content=error_body("service_not_ready", "Service is shutting down"),
                status_code=503,
            )
        if not await request.app.state.health_checker.readiness():
            return JSONResponse(
                content=error_body("service_not_ready", "Service is not ready"),
                status_code=503,
            )
        return JSONResponse(content={"message": "Service is ready"})

    @app.get("/live", tags=["health"], response_model=MessageResponse)
    async def live(request: Request) -> MessageResponse:
        """Liveness probe. Performs no dependency checks."""
        await request.app.state.health_checker.liveness()
        return MessageResponse(message="Service is alive")


def setup_metrics(app: FastAPI, settings: Settings) -> None:
    """Configure Prometheus HTTP metrics and expose them at ``metrics_path``."""
    if not settings.metrics_enabled:
        return
    Instrumentator(
        excluded_handlers=[*HEALTH_PATHS, settings.metrics_path],
    ).instrument(app).expose(app, endpoint=settings.metrics_path, include_in_schema=False)
