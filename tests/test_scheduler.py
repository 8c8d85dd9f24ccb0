"""Tests for refresh scheduling."""
from datetime import datetime, timedelta, timezone

import pytest

from src.records.scheduler import Scheduler

NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestScheduler:
    """Tests for Scheduler delays."""

    def test_restart_shortly_after_refresh(self):
        scheduler = Scheduler(interval=3600)
        updated_at = NOW - timedelta(seconds=600)

        assert scheduler.initial_delay(updated_at, NOW) == 3000

    def test_restart_long_after_refresh(self):
        scheduler = Scheduler(interval=3600)
        updated_at = NOW - timedelta(seconds=7200)

        assert scheduler.initial_delay(updated_at, NOW) == 0

    def test_restart_exactly_one_interval_later(self):
        scheduler = Scheduler(interval=3600)

        assert scheduler.initial_delay(NOW - timedelta(hours=1), NOW) == 0

    def test_updated_at_in_future_waits_one_interval(self):
        scheduler = Scheduler(interval=3600)

        assert scheduler.initial_delay(NOW + timedelta(minutes=5), NOW) == 3600

    def test_next_delay_is_fixed_interval(self):
        scheduler = Scheduler(interval=120)

        assert scheduler.next_delay() == 120
        assert scheduler.next_delay() == 120

    @pytest.mark.parametrize("interval", [0, -1])
    def test_interval_must_be_positive(self, interval):
        with pytest.raises(ValueError, match="positive"):
            Scheduler(interval=interval)
