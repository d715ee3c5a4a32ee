"""Background removal of expired session records.

The sweeper:
1. Sleeps for the configured interval
2. Deletes every record whose ``expires`` is at or before now
3. Logs and counts failures, then keeps going
"""

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

from pymongo.errors import PyMongoError

from mongostore.db.errors import StoreOperationError
from mongostore.observability.logging import get_logger
from mongostore.observability.metrics import EXPIRED_SESSIONS_SWEPT, SWEEP_ERRORS
from mongostore.sessions.expiry import utcnow

logger = get_logger(__name__)


class ExpirationSweeper:
    """Periodic task deleting expired sessions from one collection.

    Owned by the connection manager of a single store; started once after
    the collection is resolved and stopped when the store is closed.
    """

    def __init__(
        self,
        collection: Any,
        interval_seconds: float,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """Initialize sweeper.

        Args:
            collection: Resolved session collection
            interval_seconds: Seconds between sweeps; must be positive
            clock: Source of the current UTC time
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._collection = collection
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._running = False
        self._sweep_task: asyncio.Task | None = None

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the sweep loop as a background task."""
        if self._running:
            logger.warning("session_sweeper_already_running")
            return

        self._running = True
        self._sweep_task = asyncio.create_task(self._sweep_loop())

        logger.info(
            "session_sweeper_started",
            interval_seconds=self._interval_seconds,
        )

    async def stop(self) -> None:
        """Stop the sweep loop and wait for it to finish."""
        if not self._running:
            return

        self._running = False

        if self._sweep_task:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None

        logger.info("session_sweeper_stopped")

    async def sweep_once(self) -> int:
        """Delete expired records now.

        Returns:
            Number of records removed
        """
        now = self._clock()
        try:
            result = await self._collection.delete_many({"expires": {"$lte": now}})
        except PyMongoError as e:
            raise StoreOperationError(f"Failed to sweep expired sessions: {e}", cause=e) from e

        removed = int(result.deleted_count or 0)
        if removed:
            EXPIRED_SESSIONS_SWEPT.inc(removed)
            logger.info("expired_sessions_swept", count=removed)
        return removed

    async def _sweep_loop(self) -> None:
        while self._running:
            await asyncio.sleep(self._interval_seconds)
            try:
                await self.sweep_once()
            except Exception as e:
                SWEEP_ERRORS.inc()
                logger.error("session_sweep_failed", error=str(e))
