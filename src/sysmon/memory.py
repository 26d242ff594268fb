"""Physical memory readings."""

import math

import psutil

from sysmon.models import MemoryReading

BYTES_PER_GB = 1024**3


def round_half_up(value: float, digits: int = 0) -> float:
    """Round like ``Math.round`` does: halves always go up."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def bytes_to_gb(size: int) -> float:
    """Convert bytes to gigabytes rounded to 2 decimal places."""
    return round_half_up(size / BYTES_PER_GB, 2)


def memory_from_bytes(total_bytes: int, free_bytes: int) -> MemoryReading:
    """
    Derive the memory reading from OS-reported byte counts.

    Total and free are rounded first; used is computed from the rounded
    values so that used + free == total holds on the rounded figures.
    """
    total_gb = bytes_to_gb(total_bytes)
    free_gb = bytes_to_gb(free_bytes)
    used_gb = round_half_up(total_gb - free_gb, 2)

    if total_gb > 0:
        used_percent = int(round_half_up(used_gb / total_gb * 100))
    else:
        used_percent = 0

    return MemoryReading(
        total_gb=total_gb,
        used_gb=used_gb,
        free_gb=free_gb,
        used_percent=max(0, min(100, used_percent)),
    )


def read_memory() -> MemoryReading:
    """Read current physical memory usage."""
    mem = psutil.virtual_memory()
    return memory_from_bytes(mem.total, mem.available)
