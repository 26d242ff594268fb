"""Background task keeping the metrics cache warm."""

import asyncio
import contextlib
import logging

from sysmon.cache import MetricsCache

logger = logging.getLogger(__name__)

REFRESH_INTERVAL = 4.0


class CacheRefresher:
    """
    Forces a cache refresh at a fixed cadence, independent of request traffic.

    Runs as an asyncio task on the serving loop. The first refresh happens as
    soon as the task starts. Refresh failures are absorbed by the cache, so
    the loop keeps going and the last good entry stays in place.
    """

    def __init__(self, cache: MetricsCache, interval: float = REFRESH_INTERVAL) -> None:
        """
        Initialize the CacheRefresher.

        Args:
            cache: Cache to refresh.
            interval: Seconds between refreshes. Default 4.0s.
        """
        self._cache = cache
        self._interval = max(0.1, interval)
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def interval(self) -> float:
        """Get the refresh interval."""
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        """Set the refresh interval."""
        self._interval = max(0.1, value)  # Minimum 0.1 seconds

    @property
    def is_running(self) -> bool:
        """Check if the refresh task is running."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the refresh task on the running event loop."""
        if self.is_running:
            return

        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(
            self._refresh_loop(self._stop_event), name="CacheRefresher"
        )
        logger.info("Cache refresher started (every %.1fs)", self._interval)

    async def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the refresh task.

        Args:
            timeout: How long to wait for the task to finish (seconds)
                before cancelling it.
        """
        if self._stop_event is not None:
            self._stop_event.set()
        task, self._task = self._task, None
        if task is None:
            return
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=timeout)
        except asyncio.TimeoutError:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("Cache refresher stopped")

    async def _refresh_loop(self, stop_event: asyncio.Event) -> None:
        while not stop_event.is_set():
            await self._cache.refresh()

            # Wait for the interval or until stop is requested
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop_event.wait(), timeout=self._interval)
