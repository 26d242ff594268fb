"""Shared fakes for deterministic cache timing."""

import pytest

from sysmon.cache import MetricsCache
from sysmon.models import MemoryReading, ProcessRecord
from sysmon.processes import SYNTHETIC_PROCESSES


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSampler:
    """Counts calls and returns a fixed CPU percentage."""

    def __init__(self, percent: int = 20) -> None:
        self.percent = percent
        self.calls = 0
        self.error: Exception | None = None

    async def __call__(self) -> int:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.percent


class FakeCollector:
    """Returns the synthetic records unless told otherwise."""

    def __init__(self, processes: list[ProcessRecord] | None = None) -> None:
        self.processes = list(SYNTHETIC_PROCESSES) if processes is None else processes
        self.calls = 0

    async def collect(self) -> list[ProcessRecord]:
        self.calls += 1
        return list(self.processes)


def fake_memory() -> MemoryReading:
    return MemoryReading(total_gb=16.0, used_gb=12.0, free_gb=4.0, used_percent=75)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sampler() -> FakeSampler:
    return FakeSampler()


@pytest.fixture
def collector() -> FakeCollector:
    return FakeCollector()


@pytest.fixture
def cache(clock, sampler, collector) -> MetricsCache:
    return MetricsCache(
        collector,
        sampler=sampler,
        memory_reader=fake_memory,
        clock=clock,
    )
