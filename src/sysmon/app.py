"""sysmon - Terminal dashboard built on Textual."""

from collections.abc import Sequence
from enum import Enum

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import DataTable, Footer, Static

from sysmon.cache import MetricsCache
from sysmon.models import ProcessRecord, UsageSnapshot


class SortKey(Enum):
    """Sort keys for the process table."""

    CPU = "cpu"
    MEM = "mem"
    PID = "pid"
    NAME = "name"


def usage_bar(percent: float, color: str, width: int = 20) -> str:
    """Render a percentage as a Rich markup bar."""
    filled = min(int(percent / (100 / width)), width)
    return f"[{color}]█[/{color}]" * filled + "[dim]░[/dim]" * (width - filled)


def _pid_sort_value(record: ProcessRecord) -> int:
    return int(record.pid) if record.pid.isdigit() else 0


class HeaderStats(Static):
    """Header widget showing CPU and memory usage."""

    DEFAULT_CSS = """
    HeaderStats {
        height: auto;
        min-height: 3;
        padding: 1;
        background: $surface;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize HeaderStats."""
        super().__init__(*args, **kwargs)
        self._usage: UsageSnapshot | None = None

    def compose(self) -> ComposeResult:
        """Compose the header stats layout."""
        yield Horizontal(
            Static(self._get_cpu_info(), id="cpu-info"),
            Static(self._get_mem_info(), id="mem-info"),
        )

    def update_usage(self, usage: UsageSnapshot) -> None:
        """Update the statistics from a usage snapshot."""
        self._usage = usage
        try:
            self.query_one("#cpu-info", Static).update(self._get_cpu_info())
            self.query_one("#mem-info", Static).update(self._get_mem_info())
        except Exception:
            pass  # Widget not mounted yet

    def _get_cpu_info(self) -> str:
        if self._usage is None:
            return "Loading CPU info..."
        percent = self._usage.cpu_percent
        return f"CPU \\[{usage_bar(percent, 'green')}] {percent:3d}%"

    def _get_mem_info(self) -> str:
        if self._usage is None or self._usage.memory_total_gb == 0:
            return "Loading memory info..."
        usage = self._usage
        bar = usage_bar(usage.memory_used_percent, "cyan")
        return (
            f"Mem \\[{bar}] {usage.memory_used_percent:3d}% "
            f"{usage.memory_used_gb:.2f}G/{usage.memory_total_gb:.2f}G"
        )


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._sort_key: SortKey = SortKey.CPU
        self._sort_reverse: bool = True

    @property
    def sort_key(self) -> SortKey:
        """Get current sort key."""
        return self._sort_key

    def cycle_sort(self) -> SortKey:
        """Cycle to the next sort key and return it."""
        keys = list(SortKey)
        self._sort_key = keys[(keys.index(self._sort_key) + 1) % len(keys)]
        self._sort_reverse = self._sort_key in (SortKey.CPU, SortKey.MEM)
        return self._sort_key

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"
        table.add_column("PID", key="pid", width=8)
        table.add_column("CPU%", key="cpu", width=8)
        table.add_column("MEM MB", key="mem", width=10)
        table.add_column("STATUS", key="status", width=9)
        table.add_column("Name", key="name")

    def update_processes(self, processes: Sequence[ProcessRecord]) -> None:
        """
        Replace the table contents with a new process list.

        Records are keyed by their snapshot id, which is only unique within
        one refresh, so rows are rebuilt in sorted order on every update.
        """
        table = self.query_one("#process-table", DataTable)
        table.clear()
        for record in self._sort_processes(processes):
            table.add_row(
                record.pid,
                f"{record.cpu_percent:5.1f}",
                f"{record.memory_mb:8.1f}",
                record.status,
                record.name[:50],
                key=str(record.id),
            )

    def _sort_processes(self, processes: Sequence[ProcessRecord]) -> list[ProcessRecord]:
        key_func = {
            SortKey.CPU: lambda p: p.cpu_percent,
            SortKey.MEM: lambda p: p.memory_mb,
            SortKey.PID: _pid_sort_value,
            SortKey.NAME: lambda p: p.name.lower(),
        }
        return sorted(processes, key=key_func[self._sort_key], reverse=self._sort_reverse)


class SysmonApp(App):
    """Terminal dashboard over the metrics cache."""

    TITLE = "sysmon"
    SUB_TITLE = "System Metrics Monitor"

    CSS = """
    Screen {
        layout: vertical;
    }

    #header-stats {
        dock: top;
        height: auto;
        min-height: 3;
    }

    Horizontal {
        height: auto;
    }

    #cpu-info {
        width: 1fr;
        padding-right: 2;
    }

    #mem-info {
        width: 1fr;
        padding-left: 2;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("f6", "sort", "Sort"),
    ]

    def __init__(self, cache: MetricsCache | None = None, poll_rate: float = 1.0) -> None:
        """Initialize the SysmonApp."""
        super().__init__()
        self._cache = cache or MetricsCache()
        self._poll_rate = poll_rate
        self._processes: tuple[ProcessRecord, ...] = ()

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield HeaderStats(id="header-stats")
        yield ProcessTable()
        yield Footer()

    def on_mount(self) -> None:
        """Start polling the cache when the app is mounted."""
        self.set_interval(self._poll_rate, self._check_for_updates)
        self.call_later(self._check_for_updates)

    async def _check_for_updates(self) -> None:
        """Read the cache and refresh the UI if a new generation arrived."""
        usage = await self._cache.get_usage()
        processes = await self._cache.get_processes()
        self.query_one("#header-stats", HeaderStats).update_usage(usage)
        if processes is not self._processes:
            self._processes = processes
            self.query_one(ProcessTable).update_processes(processes)

    def action_sort(self) -> None:
        """Cycle through sort keys."""
        process_table = self.query_one(ProcessTable)
        new_sort_key = process_table.cycle_sort()
        process_table.update_processes(self._processes)
        self.notify(f"Sort: {new_sort_key.value.upper()}")

