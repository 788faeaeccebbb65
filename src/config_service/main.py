from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from src.config_service.api.middlewares import setup_middlewares
from src.config_service.api.v1.router import api_router
from src.config_service.core.config import get_settings
from src.config_service.core.db import (
    check_migrations_async,
    create_engine_from_settings,
    create_session_factory,
    run_migrations_async,
)
from src.config_service.core.exceptions import setup_exception_handlers
from src.config_service.core.health import HealthChecker, setup_health_endpoints, setup_metrics
from src.config_service.core.logging import get_logger, setup_logging
from src.config_service.core.metrics import MetricsRefresher
from src.config_service.core.redis import close_redis, create_redis
from src.config_service.core.shutdown import RequestTracker

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info(
        "Starting service",
        app=settings.app_name,
        version=settings.app_version,
        env=settings.app_env,
    )

    # A dirty, failed or pending migration aborts startup before any traffic is served
    if settings.database_auto_migrate:
        await run_migrations_async(settings, get_logger("config_service.migrations"))
    else:
        await check_migrations_async(settings, get_logger("config_service.migrations"))

    engine = create_engine_from_settings(settings)
    redis = create_redis(settings)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.redis = redis
    app.state.health_checker = HealthChecker(
        engine,
        redis,
        settings.app_version,
        logger=get_logger("config_service.health"),
        timeout=settings.health_check_timeout,
        readiness_timeout=settings.readiness_check_timeout,
    )
    refresher = None
    if settings.metrics_enabled:
        refresher = MetricsRefresher(
            engine,
            app.state.session_factory,
            settings.metrics_refresh_interval,
            logger=get_logger("config_service.metrics"),
        )
        refresher.start()
    app.state.metrics_refresher = refresher

    yield

    # Graceful shutdown with proper request draining
    tracker: RequestTracker = app.state.request_tracker
    grace_period = settings.shutdown_grace_period
    logger.info("Shutdown initiated", in_flight=tracker.in_flight_count)
    await tracker.start_shutdown()
    await tracker.wait_for_drain(timeout=grace_period)

    if refresher is not None:
        await refresher.stop()
    logger.info("Closing connections...")
    await close_redis(redis, logger)
    await engine.dispose()
    logger.info("Shutdown complete")


OPENAPI_TAGS = [
    {"name": "tags", "description": "Labels for categorizing templates"},
    {"name": "environments", "description": "Deployment targets"},
    {"name": "templates", "description": "Versioned configuration documents"},
    {"name": "health", "description": "Liveness, readiness and dependency health"},
    {"name": "system", "description": "Service information"},
]


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Configuration template management service",
        version=settings.app_version,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        debug=settings.debug,
        docs_url="/docs" if settings.openapi_enabled else None,
        redoc_url="/redoc" if settings.openapi_enabled else None,
        openapi_url="/openapi.json" if settings.openapi_enabled else None,
    )
    app.state.request_tracker = RequestTracker(get_logger("config_service.shutdown"))

    setup_exception_handlers(app)
    setup_middlewares(app, settings)
    setup_health_endpoints(app)
    app.include_router(api_router)
    setup_metrics(app, settings)

    return app


def run() -> None:
    """Serve the app with uvicorn using the server settings."""
    settings = get_settings()
    uvicorn.run(
        "src.config_service.main:app",
        host=settings.server_host,
        port=settings.server_port,
        timeout_keep_alive=settings.server_idle_timeout,
        timeout_graceful_shutdown=settings.shutdown_grace_period,
        log_level=settings.log_level,
        access_log=False,
    )


app = create_app()
