"""Request tracking middleware for graceful shutdown."""

from fastapi import Request, Response
from starlette.middleware.base import RequestResponseEndpoint

from src.config_service.core.health import HEALTH_PATHS


async def request_tracking_middleware(
    request: Request, call_next: RequestResponseEndpoint
) -> Response:
    """Track in-flight requests for graceful shutdown."""
    # Don't track health checks or metrics
    path = request.url.path
    if path in HEALTH_PATHS or path == request.app.state.metrics_path:
        return await call_next(request)

    async with request.app.state.request_tracker.track_request():
        return await call_next(request)
