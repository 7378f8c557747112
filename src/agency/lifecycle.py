"""Shutdown signal coordination for the server process."""
import asyncio

import structlog

logger = structlog.get_logger()


class GracefulShutdown:
    """Signals shutdown from OS signal handlers to the serving task."""

    def __init__(self, timeout: float = 30.0) -> None:
        """Initialize shutdown coordinator.

        Args:
            timeout: Seconds the server gets to finish in-flight requests.
        """
        self._triggered = False
        self._event = asyncio.Event()
        self.timeout = timeout

    def trigger(self) -> None:
        """Signal shutdown. Calling it again has no effect."""
        if self._triggered:
            return
        logger.info("shutdown_triggered")
        self._triggered = True
        self._event.set()

    async def wait_for_trigger(self) -> None:
        """Block until trigger() is called."""
        await self._event.wait()
