"""Process snapshot collection through the platform's listing command."""

import asyncio
import csv
import logging
import random
import sys
from abc import ABC, abstractmethod
from dataclasses import replace

from sysmon.models import ProcessRecord

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"
UNKNOWN_PID = "0"

# Fixed demonstration entries, always listed ahead of the real processes
SYNTHETIC_PROCESSES: tuple[ProcessRecord, ...] = (
    ProcessRecord(id=1, name="chrome.exe", pid="1234", cpu_percent=25.5, memory_mb=856.2),
    ProcessRecord(id=2, name="node.exe", pid="5678", cpu_percent=12.3, memory_mb=342.1),
    ProcessRecord(id=3, name="code.exe", pid="9012", cpu_percent=8.7, memory_mb=623.4),
    ProcessRecord(id=4, name="firefox.exe", pid="3456", cpu_percent=15.2, memory_mb=721.8),
    ProcessRecord(id=5, name="explorer.exe", pid="7890", cpu_percent=3.1, memory_mb=124.5),
)


class CollectionError(Exception):
    """The process listing command failed or produced unusable output."""


def _to_float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        return 0.0


class ProcessLister(ABC):
    """Runs a platform listing command and parses its output."""

    command: list[str]
    limit: int

    async def run(self) -> str:
        """
        Run the listing command and return its standard output.

        Raises:
            CollectionError: If the command cannot be started or exits non-zero.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *self.command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CollectionError(f"cannot run {self.command[0]}: {exc}") from exc

        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            detail = stderr.decode(errors="replace").strip()
            raise CollectionError(
                f"{self.command[0]} exited with status {proc.returncode}: {detail}"
            )
        return stdout.decode(errors="replace")

    @abstractmethod
    def parse(self, output: str) -> list[ProcessRecord]:
        """Parse command output into records numbered from 1."""

    async def list_processes(self) -> list[ProcessRecord]:
        """Run the command and parse its output."""
        return self.parse(await self.run())


class PsProcessLister(ProcessLister):
    """Unix-like listing via ``ps``, sorted by CPU usage descending."""

    # %mem is scaled into a rough MB figure, not an exact memory size
    MEMORY_SCALE = 10

    def __init__(self, command: list[str] | None = None, limit: int = 20) -> None:
        if command is None:
            if sys.platform == "darwin":
                command = ["ps", "-Ao", "pid,ppid,%cpu,%mem,comm", "-r"]
            else:
                command = ["ps", "-eo", "pid,ppid,%cpu,%mem,comm", "--sort=-%cpu"]
        self.command = command
        self.limit = limit

    def parse(self, output: str) -> list[ProcessRecord]:
        """Parse ``pid ppid %cpu %mem comm`` rows, skipping the header."""
        lines = output.strip().splitlines()[: self.limit][1:]
        records: list[ProcessRecord] = []
        for index, line in enumerate(lines, start=1):
            columns = line.split(maxsplit=4)
            records.append(
                ProcessRecord(
                    id=index,
                    name=columns[4] if len(columns) > 4 else UNKNOWN_NAME,
                    pid=columns[0] if columns else UNKNOWN_PID,
                    cpu_percent=_to_float(columns[2]) if len(columns) > 2 else 0.0,
                    memory_mb=(
                        _to_float(columns[3]) * self.MEMORY_SCALE if len(columns) > 3 else 0.0
                    ),
                )
            )
        return records


class TasklistProcessLister(ProcessLister):
    """
    Windows listing via ``tasklist /fo csv``.

    tasklist reports no per-process CPU figure and its memory column is not
    used, so both values are random placeholders: CPU in [0, 30) and memory
    in [0, 1000).
    """

    def __init__(
        self,
        command: list[str] | None = None,
        limit: int = 15,
        rng: random.Random | None = None,
    ) -> None:
        self.command = command or ["tasklist", "/fo", "csv"]
        self.limit = limit
        self._rng = rng or random.Random()

    def parse(self, output: str) -> list[ProcessRecord]:
        """Parse quoted CSV rows, dropping the header row."""
        lines = output.strip().splitlines()[1:][: self.limit]
        records: list[ProcessRecord] = []
        for index, row in enumerate(csv.reader(lines), start=1):
            records.append(
                ProcessRecord(
                    id=index,
                    name=row[0] if row and row[0] else UNKNOWN_NAME,
                    pid=row[1] if len(row) > 1 and row[1] else UNKNOWN_PID,
                    cpu_percent=self._rng.random() * 30,
                    memory_mb=self._rng.random() * 1000,
                )
            )
        return records


def default_lister() -> ProcessLister:
    """Return the lister matching the running platform."""
    if sys.platform == "win32":
        return TasklistProcessLister()
    return PsProcessLister()


class ProcessCollector:
    """
    Builds the process list served by the cache.

    The five synthetic records always come first, followed by at most
    ``max_real`` parsed records. A failing lister is logged and yields the
    synthetic records alone; ``collect`` never raises.
    """

    def __init__(self, lister: ProcessLister | None = None, max_real: int = 10) -> None:
        self._lister = lister or default_lister()
        self._max_real = max_real

    async def collect(self) -> list[ProcessRecord]:
        """Collect a fresh process list."""
        try:
            real = await self._lister.list_processes()
        except CollectionError as exc:
            logger.warning("Failed to list processes: %s", exc)
            real = []
        except Exception:
            logger.exception("Failed to collect process list")
            real = []

        merged = [*SYNTHETIC_PROCESSES, *real[: self._max_real]]
        return [replace(record, id=index) for index, record in enumerate(merged, start=1)]
