"""Tests for the injected clocks (sales_kernel/domain/clock.py)."""

from datetime import date, datetime, timezone

from sales_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:

    def test_fixed_until_advanced(self):
        clock = DeterministicClock(datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc))
        assert clock.now() == clock.now()
        first = clock.now()
        assert clock.tick() > first

    def test_advance_and_set_time(self):
        clock = DeterministicClock()
        clock.advance(3600)
        assert clock.now() == datetime(2024, 1, 1, 13, 0, tzinfo=timezone.utc)
        clock.set_time(datetime(2025, 2, 3, tzinfo=timezone.utc))
        assert clock.today() == date(2025, 2, 3)

    def test_epoch_millis(self):
        clock = DeterministicClock(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc))
        assert clock.epoch_millis() == 1000


class TestSystemClock:

    def test_aware_utc(self):
        assert SystemClock().now().tzinfo is not None
