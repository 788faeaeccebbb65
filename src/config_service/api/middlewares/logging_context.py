"""Logging context middleware for request correlation and access logs."""

import time

from asgi_correlation_id import correlation_id
from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.config_service.core.health import HEALTH_PATHS
from src.config_service.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
)

logger = get_logger("config_service.access")


async def logging_context_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Bind request context for logging and write one access log line per request."""
    clear_request_context()
    bind_request_context(correlation_id.get(), method=request.method, path=request.url.path)
    start = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        path = request.url.path
        # Probes and scrapes are too frequent for info level
        quiet = path in HEALTH_PATHS or path == request.app.state.metrics_path
        log = logger.debug if quiet else logger.info
        log(
            "Request completed",
            status=status_code,
            latency_ms=round((time.perf_counter() - start) * 1000, 3),
            client_ip=request.client.host if request.client else None,
        )
        clear_request_context()
