"""structlog setup shared by the API server and the migration CLI."""

import logging
import sys
from typing import Any

import structlog
from structlog.contextvars import bind_contextvars, clear_contextvars

# Third-party loggers and the level they are held at
_LIBRARY_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "alembic.runtime.migration": logging.INFO,
    # Replaced by the access log middleware
    "uvicorn.access": logging.WARNING,
    "asyncio": logging.WARNING,
}


def _renderer(fmt: str) -> list[structlog.typing.Processor]:
    if fmt == "console":
        return [structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]
    return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]


def setup_logging(level: str = "info", fmt: str = "json") -> None:
    """Route structlog and stdlib logging to stdout.

    Args:
        level: Minimum level name, one of debug, info, warning, error, critical.
        fmt: "json" for one object per line, "console" for local development.
    """
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            *_renderer(fmt),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    for name, lib_level in _LIBRARY_LEVELS.items():
        logging.getLogger(name).setLevel(max(lib_level, log_level))


def get_logger(name: str | None = None, **initial: Any) -> structlog.stdlib.BoundLogger:
    """Logger for ``name`` with ``initial`` key/values bound to every event."""
    logger = structlog.get_logger(name)
    return logger.bind(**initial) if initial else logger


def bind_request_context(request_id: str | None, **fields: Any) -> None:
    """Attach the correlation ID (and any extra fields) to log events of this request."""
    if request_id:
        bind_contextvars(request_id=request_id)
    if fields:
        bind_contextvars(**fields)


def clear_request_context() -> None:
    clear_contextvars()
