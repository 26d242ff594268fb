"""Data models for sysmon."""

from dataclasses import dataclass

PROCESS_STATUS_RUNNING = "Running"


@dataclass(slots=True, frozen=True)
class MemoryReading:
    """Physical memory figures in gigabytes, rounded to 2 decimal places."""

    total_gb: float
    used_gb: float
    free_gb: float
    used_percent: int  # 0 - 100


@dataclass(slots=True, frozen=True)
class UsageSnapshot:
    """Point-in-time CPU and memory reading."""

    cpu_percent: int  # 0 - 100, clamped
    memory_total_gb: float
    memory_used_gb: float
    memory_free_gb: float
    memory_used_percent: int
    sampled_at: float  # Epoch seconds

    @classmethod
    def empty(cls) -> "UsageSnapshot":
        """Return the zero value served before the first refresh."""
        return cls(
            cpu_percent=0,
            memory_total_gb=0.0,
            memory_used_gb=0.0,
            memory_free_gb=0.0,
            memory_used_percent=0,
            sampled_at=0.0,
        )


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable snapshot of one observed or synthesized process."""

    id: int  # Unique within one snapshot only
    name: str
    pid: str  # Listing formats differ per platform
    cpu_percent: float
    memory_mb: float
    status: str = PROCESS_STATUS_RUNNING


@dataclass(slots=True, frozen=True)
class SystemInfo:
    """Static host description, computed on demand."""

    platform: str
    architecture: str
    hostname: str
    uptime: int  # Seconds
    cpu_cores: int
    cpu_model: str
    total_memory: float  # GB
