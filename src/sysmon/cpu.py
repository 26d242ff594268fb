"""CPU utilisation sampling from per-core tick counters."""

import asyncio
import math
from collections.abc import Callable
from dataclasses import dataclass

import psutil

# psutil reports guest time inside user/nice already on Linux
_EXCLUDED_FIELDS = frozenset({"guest", "guest_nice"})


@dataclass(slots=True, frozen=True)
class CpuTicks:
    """Idle and total tick counts averaged over all logical cores."""

    idle: float
    total: float


def cpu_average() -> CpuTicks:
    """Take a tick snapshot of every logical core and average it per core."""
    per_core = psutil.cpu_times(percpu=True)
    if not per_core:
        return CpuTicks(idle=0.0, total=0.0)

    total_idle = 0.0
    total_tick = 0.0
    for times in per_core:
        for field in times._fields:
            if field not in _EXCLUDED_FIELDS:
                total_tick += getattr(times, field)
        total_idle += times.idle

    cores = len(per_core)
    return CpuTicks(idle=total_idle / cores, total=total_tick / cores)


def percent_from_ticks(start: CpuTicks, end: CpuTicks) -> int:
    """
    Convert two tick snapshots into a utilisation percentage.

    Returns 0 when no ticks elapsed between the snapshots. The result is
    always clamped to [0, 100].
    """
    idle_delta = end.idle - start.idle
    total_delta = end.total - start.total
    if total_delta <= 0:
        return 0

    percent = 100 - math.floor(100 * idle_delta / total_delta)
    return max(0, min(100, percent))


async def sample_cpu(
    interval: float = 1.0,
    reader: Callable[[], CpuTicks] = cpu_average,
) -> int:
    """
    Measure CPU utilisation over ``interval`` seconds.

    Only the calling task is suspended while waiting between the two
    snapshots.
    """
    start = reader()
    await asyncio.sleep(interval)
    end = reader()
    return percent_from_ticks(start, end)
