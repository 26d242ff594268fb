"""Static host information, computed fresh on every call."""

import platform
import socket
import sys
import time
from pathlib import Path

import psutil

from sysmon.memory import bytes_to_gb
from sysmon.models import SystemInfo

_CPUINFO = Path("/proc/cpuinfo")


def cpu_model() -> str:
    """Best-effort CPU model string."""
    if _CPUINFO.exists():
        try:
            for line in _CPUINFO.read_text().splitlines():
                if line.startswith("model name"):
                    return line.split(":", 1)[1].strip()
        except OSError:
            pass  # Fall back to platform.processor()
    return platform.processor() or "Unknown"


def get_system_info() -> SystemInfo:
    """Describe the host. Nothing here is cached."""
    return SystemInfo(
        platform=sys.platform,
        architecture=platform.machine(),
        hostname=socket.gethostname(),
        uptime=int(time.time() - psutil.boot_time()),
        cpu_cores=psutil.cpu_count(logical=True) or 0,
        cpu_model=cpu_model(),
        total_memory=bytes_to_gb(psutil.virtual_memory().total),
    )
