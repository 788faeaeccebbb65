"""Redis client construction.

The client is created at startup and kept on ``app.state.redis``. The service
only pings it for health and readiness.
"""

import structlog
from redis.asyncio import ConnectionPool, Redis

from src.config_service.core.config import Settings
from src.config_service.core.logging import get_logger


def create_redis(settings: Settings) -> Redis:
    """Build a pooled client. Connections open lazily on first command."""
    pool = ConnectionPool(
        host=settings.redis_host,
        port=settings.redis_port,
        password=settings.redis_password or None,
        db=settings.redis_db,
        socket_connect_timeout=settings.health_check_timeout,
        socket_timeout=settings.health_check_timeout,
        decode_responses=True,  # Return strings instead of bytes
    )
    return Redis(connection_pool=pool)


async def close_redis(client: Redis, logger: structlog.stdlib.BoundLogger | None = None) -> None:
    """Close the client and its connection pool. Call during shutdown."""
    logger = logger or get_logger(__name__)
    await client.aclose()
    await client.connection_pool.disconnect()
    logger.info("Redis connection closed")
