"""Background task for purging expired upload tickets."""

import asyncio
import logging
from typing import Optional

from gateway.tickets import TicketRegistry

logger = logging.getLogger(__name__)

SWEEP_INTERVAL_SECONDS = 60


class TicketSweeper:
    """
    Background task that periodically drops expired upload tickets.
    """

    def __init__(self, registry: TicketRegistry, interval_seconds: float = SWEEP_INTERVAL_SECONDS):
        """
        Initialize sweeper task.

        Args:
            registry: Ticket registry to sweep
            interval_seconds: Time between sweeps (default 60 seconds)
        """
        self.registry = registry
        self.interval_seconds = interval_seconds
        self._running = False
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Ticket sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Started upload ticket sweeper (interval: {self.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Stopped upload ticket sweeper")

    async def _run(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)

                if not self._running:
                    break

                self.sweep()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in ticket sweeper: {e}", exc_info=True)

    def sweep(self) -> int:
        """Execute one sweep and return the number of tickets dropped."""
        removed = self.registry.purge_expired()
        if removed:
            logger.info(f"Purged {removed} expired upload ticket(s), {len(self.registry)} active")
        else:
            logger.debug("No expired upload tickets")
        return removed
