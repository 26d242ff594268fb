"""Time-to-live cache shared by every metrics consumer."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from sysmon.cpu import sample_cpu
from sysmon.memory import read_memory
from sysmon.models import MemoryReading, ProcessRecord, UsageSnapshot
from sysmon.processes import ProcessCollector

logger = logging.getLogger(__name__)

USAGE_TTL = 3.0
PROCESSES_TTL = 5.0


class CacheState(Enum):
    """Freshness of the cache relative to one threshold."""

    COLD = "cold"
    FRESH = "fresh"
    STALE = "stale"
    REFRESHING = "refreshing"


@dataclass(slots=True, frozen=True)
class CacheEntry:
    """One refresh generation, published as a single unit."""

    usage: UsageSnapshot
    processes: tuple[ProcessRecord, ...]
    last_update: float

    @classmethod
    def cold(cls) -> "CacheEntry":
        return cls(usage=UsageSnapshot.empty(), processes=(), last_update=0.0)


class MetricsCache:
    """
    Holds the latest usage snapshot and process list.

    Reads check the age of the current entry against a per-kind threshold and
    refresh both kinds together when it is exceeded. Refreshes are
    single-flight: concurrent triggers await the same in-flight refresh, and
    the result replaces the whole entry at once so readers never mix
    generations.
    """

    def __init__(
        self,
        collector: ProcessCollector | None = None,
        *,
        sampler: Callable[[], Awaitable[int]] = sample_cpu,
        memory_reader: Callable[[], MemoryReading] = read_memory,
        clock: Callable[[], float] = time.time,
        usage_ttl: float = USAGE_TTL,
        processes_ttl: float = PROCESSES_TTL,
    ) -> None:
        self._collector = collector or ProcessCollector()
        self._sampler = sampler
        self._memory_reader = memory_reader
        self._clock = clock
        self.usage_ttl = usage_ttl
        self.processes_ttl = processes_ttl
        self._entry = CacheEntry.cold()
        self._inflight: asyncio.Task[bool] | None = None
        self.refresh_count = 0

    @property
    def entry(self) -> CacheEntry:
        """The currently published entry."""
        return self._entry

    @property
    def is_refreshing(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def is_stale(self, ttl: float) -> bool:
        """Check whether the current entry is older than ``ttl`` seconds."""
        return self._clock() - self._entry.last_update > ttl

    def state(self, ttl: float) -> CacheState:
        """Report the cache state for a given freshness threshold."""
        if self.is_refreshing:
            return CacheState.REFRESHING
        if self._entry.last_update == 0.0:
            return CacheState.COLD
        if self.is_stale(ttl):
            return CacheState.STALE
        return CacheState.FRESH

    async def get_usage(self) -> UsageSnapshot:
        """Return the usage snapshot, refreshing first if it is stale."""
        if self.is_stale(self.usage_ttl):
            await self.refresh()
        return self._entry.usage

    async def get_processes(self) -> tuple[ProcessRecord, ...]:
        """Return the process list, refreshing first if it is stale."""
        if self.is_stale(self.processes_ttl):
            await self.refresh()
        return self._entry.processes

    async def refresh(self) -> bool:
        """
        Refresh usage and processes together.

        Joins the refresh already in flight when there is one.

        Returns:
            True if a new entry was published, False if the refresh failed
            and the previous entry was kept.
        """
        task = self._inflight
        if task is None or task.done():
            task = asyncio.ensure_future(self._run_refresh())
            self._inflight = task
            task.add_done_callback(self._clear_inflight)
        # A cancelled caller must not cancel the refresh for the others
        return await asyncio.shield(task)

    def _clear_inflight(self, task: "asyncio.Task[bool]") -> None:
        if self._inflight is task:
            self._inflight = None

    async def _run_refresh(self) -> bool:
        try:
            cpu_percent, processes = await asyncio.gather(
                self._sampler(),
                self._collector.collect(),
            )
            memory = self._memory_reader()
        except Exception:
            logger.exception("Failed to refresh metrics cache")
            return False

        now = self._clock()
        self._entry = CacheEntry(
            usage=UsageSnapshot(
                cpu_percent=cpu_percent,
                memory_total_gb=memory.total_gb,
                memory_used_gb=memory.used_gb,
                memory_free_gb=memory.free_gb,
                memory_used_percent=memory.used_percent,
                sampled_at=now,
            ),
            processes=tuple(processes),
            last_update=now,
        )
        self.refresh_count += 1
        logger.debug(
            "Metrics cache refreshed: cpu=%d%% mem=%d%% processes=%d",
            cpu_percent,
            memory.used_percent,
            len(processes),
        )
        return True
