"""In-flight request accounting for graceful shutdown."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from src.config_service.core.logging import get_logger


class RequestTracker:
    """Counts requests being served so shutdown can let them finish.

    Lives on ``app.state.request_tracker``. Once draining starts, readiness
    reports 503 while already accepted requests run to completion. All access
    happens on the event loop thread, so the counter needs no lock.
    """

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self.logger = logger or get_logger(__name__)
        self._in_flight = 0
        self._draining = False
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def is_shutting_down(self) -> bool:
        return self._draining

    @property
    def in_flight_count(self) -> int:
        return self._in_flight

    @asynccontextmanager
    async def track_request(self) -> AsyncGenerator[None]:
        self._in_flight += 1
        self._idle.clear()
        try:
            yield
        finally:
            self._in_flight -= 1
            if self._in_flight == 0:
                self._idle.set()
                if self._draining:
                    self.logger.info("In-flight requests drained")

    async def start_shutdown(self) -> None:
        """Stop reporting ready. Requests already accepted keep running."""
        self._draining = True
        self.logger.info("Draining requests", in_flight=self._in_flight)

    async def wait_for_drain(self, timeout: float) -> bool:
        """Block until no request is in flight or ``timeout`` seconds pass.

        Returns:
            False when the grace period ran out with requests still running.
        """
        try:
            await asyncio.wait_for(self._idle.wait(), timeout=timeout)
        except TimeoutError:
            self.logger.warning(
                "Grace period expired with requests in flight",
                timeout=timeout,
                in_flight=self._in_flight,
            )
            return False
        return True
