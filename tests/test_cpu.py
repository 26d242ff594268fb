"""Tests for CPU sampling."""

from collections import namedtuple

import pytest

from sysmon import cpu
from sysmon.cpu import CpuTicks, cpu_average, percent_from_ticks, sample_cpu

# Same field layout psutil uses on Linux
scputimes = namedtuple(
    "scputimes",
    ["user", "nice", "system", "idle", "iowait", "irq", "softirq", "steal", "guest", "guest_nice"],
)


class TestPercentFromTicks:
    """Tests for the delta computation."""

    def test_idle_800_of_1000(self):
        """Test 800 idle ticks out of 1000 gives 20 percent."""
        start = CpuTicks(idle=0.0, total=0.0)
        end = CpuTicks(idle=800.0, total=1000.0)

        assert percent_from_ticks(start, end) == 20

    def test_fractional_idle_is_floored(self):
        """Test the idle share is floored before subtracting."""
        start = CpuTicks(idle=100.0, total=200.0)
        end = CpuTicks(idle=100.0 + 805.0, total=200.0 + 1000.0)

        assert percent_from_ticks(start, end) == 20  # 100 - floor(80.5)

    def test_zero_total_delta_returns_zero(self):
        """Test no elapsed ticks returns 0 instead of dividing by zero."""
        ticks = CpuTicks(idle=500.0, total=1000.0)

        assert percent_from_ticks(ticks, ticks) == 0

    def test_negative_total_delta_returns_zero(self):
        """Test a counter that went backwards returns 0."""
        start = CpuTicks(idle=500.0, total=1000.0)
        end = CpuTicks(idle=400.0, total=900.0)

        assert percent_from_ticks(start, end) == 0

    def test_clamped_below_zero(self):
        """Test idle delta above total delta clamps to 0."""
        start = CpuTicks(idle=0.0, total=0.0)
        end = CpuTicks(idle=1200.0, total=1000.0)

        assert percent_from_ticks(start, end) == 0

    def test_clamped_above_hundred(self):
        """Test a negative idle delta clamps to 100."""
        start = CpuTicks(idle=500.0, total=0.0)
        end = CpuTicks(idle=300.0, total=1000.0)

        assert percent_from_ticks(start, end) == 100

    def test_always_in_range(self):
        """Test results stay in [0, 100] across a spread of deltas."""
        start = CpuTicks(idle=0.0, total=0.0)
        for idle in (-50.0, 0.0, 1.0, 250.0, 999.0, 1000.0, 5000.0):
            for total in (0.0, 1.0, 10.0, 1000.0):
                result = percent_from_ticks(start, CpuTicks(idle=idle, total=total))
                assert 0 <= result <= 100


class TestCpuAverage:
    """Tests for the per-core tick snapshot."""

    def test_averages_per_core(self, monkeypatch):
        """Test idle and total are averaged over cores."""
        cores = [
            scputimes(100.0, 0.0, 50.0, 800.0, 10.0, 5.0, 5.0, 0.0, 30.0, 0.0),
            scputimes(300.0, 0.0, 50.0, 600.0, 10.0, 5.0, 5.0, 0.0, 0.0, 0.0),
        ]
        monkeypatch.setattr(cpu.psutil, "cpu_times", lambda percpu: cores)

        ticks = cpu_average()

        assert ticks.idle == 700.0
        # guest time is part of user already and is not counted twice
        assert ticks.total == 970.0

    def test_no_cores(self, monkeypatch):
        """Test an empty core list yields zero ticks."""
        monkeypatch.setattr(cpu.psutil, "cpu_times", lambda percpu: [])

        assert cpu_average() == CpuTicks(idle=0.0, total=0.0)

    def test_real_snapshot(self):
        """Test a real snapshot has positive totals."""
        ticks = cpu_average()

        assert ticks.total > 0
        assert 0 <= ticks.idle <= ticks.total


class TestSampleCpu:
    """Tests for the timed sample."""

    @pytest.mark.asyncio
    async def test_uses_two_snapshots(self):
        """Test sample_cpu reads ticks before and after the wait."""
        readings = iter([CpuTicks(idle=0.0, total=0.0), CpuTicks(idle=800.0, total=1000.0)])

        result = await sample_cpu(interval=0.01, reader=lambda: next(readings))

        assert result == 20

    @pytest.mark.asyncio
    async def test_identical_snapshots(self):
        """Test identical snapshots give 0."""
        result = await sample_cpu(interval=0, reader=lambda: CpuTicks(idle=5.0, total=10.0))

        assert result == 0

    @pytest.mark.asyncio
    async def test_real_sample_in_range(self):
        """Test a real sample is a percentage."""
        result = await sample_cpu(interval=0.1)

        assert isinstance(result, int)
        assert 0 <= result <= 100
