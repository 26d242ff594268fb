"""Tests for the sysmon dashboard."""

import pytest
from textual.widgets import DataTable

from sysmon.app import HeaderStats, ProcessTable, SortKey, SysmonApp, usage_bar
from sysmon.cache import MetricsCache
from sysmon.models import ProcessRecord, UsageSnapshot

from conftest import FakeClock, FakeCollector, FakeSampler, fake_memory


def make_app() -> SysmonApp:
    cache = MetricsCache(
        FakeCollector(), sampler=FakeSampler(), memory_reader=fake_memory, clock=FakeClock()
    )
    return SysmonApp(cache, poll_rate=0.1)


def test_usage_bar_full():
    """Test a full bar has no empty cells."""
    assert "░" not in usage_bar(100, "green")


def test_usage_bar_empty():
    """Test an empty bar has no filled cells."""
    assert "█" not in usage_bar(0, "green")


class TestSortKey:
    """Tests for SortKey enum."""

    def test_sort_key_members(self):
        """Test SortKey enum has all expected members."""
        assert [key.value for key in SortKey] == ["cpu", "mem", "pid", "name"]


@pytest.mark.asyncio
async def test_app_creation():
    """Test SysmonApp can be instantiated."""
    app = make_app()
    assert app.title == "sysmon"
    assert app.sub_title == "System Metrics Monitor"


@pytest.mark.asyncio
async def test_app_compose():
    """Test SysmonApp composes correctly."""
    app = make_app()
    async with app.run_test() as pilot:
        assert pilot.app.query_one("#header-stats") is not None
        assert pilot.app.query_one("#process-table") is not None


@pytest.mark.asyncio
async def test_app_quit_binding():
    """Test that 'q' binding triggers quit."""
    app = make_app()
    async with app.run_test() as pilot:
        await pilot.press("q")
        assert pilot.app._exit


@pytest.mark.asyncio
async def test_app_sort_binding():
    """Test that F6 binding cycles sort key."""
    app = make_app()
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)
        initial_sort = process_table.sort_key

        await pilot.press("f6")

        assert process_table.sort_key != initial_sort


@pytest.mark.asyncio
async def test_process_table_cycle_sort():
    """Test ProcessTable sort key cycling."""
    app = make_app()
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)

        assert process_table.sort_key == SortKey.CPU
        assert process_table.cycle_sort() == SortKey.MEM
        assert process_table.cycle_sort() == SortKey.PID
        assert process_table.cycle_sort() == SortKey.NAME
        assert process_table.cycle_sort() == SortKey.CPU


@pytest.mark.asyncio
async def test_process_table_update_processes():
    """Test ProcessTable replaces its rows on update."""
    app = make_app()
    async with app.run_test() as pilot:
        process_table = pilot.app.query_one(ProcessTable)

        process_table.update_processes(
            [
                ProcessRecord(id=1, name="a", pid="100", cpu_percent=1.0, memory_mb=10.0),
                ProcessRecord(id=2, name="b", pid="200", cpu_percent=2.0, memory_mb=20.0),
            ]
        )
        assert process_table.query_one("#process-table", DataTable).row_count == 2

        process_table.update_processes(
            [ProcessRecord(id=1, name="b", pid="200", cpu_percent=3.0, memory_mb=20.0)]
        )
        assert process_table.query_one("#process-table", DataTable).row_count == 1


@pytest.mark.asyncio
async def test_app_receives_updates_from_cache():
    """Test the app fills the table from the cache."""
    app = make_app()
    async with app.run_test() as pilot:
        await pilot.pause(0.5)

        process_table = pilot.app.query_one(ProcessTable)
        assert process_table.query_one("#process-table", DataTable).row_count == 5


@pytest.mark.asyncio
async def test_header_stats_update():
    """Test that header stats can be updated."""
    app = make_app()
    async with app.run_test() as pilot:
        header = pilot.app.query_one("#header-stats", HeaderStats)
        usage = UsageSnapshot(
            cpu_percent=42,
            memory_total_gb=16.0,
            memory_used_gb=8.0,
            memory_free_gb=8.0,
            memory_used_percent=50,
            sampled_at=1.0,
        )

        header.update_usage(usage)

        assert header._usage == usage
        assert "42%" in header._get_cpu_info()
        assert "8.00G/16.00G" in header._get_mem_info()
