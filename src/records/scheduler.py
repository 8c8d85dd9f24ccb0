"""Refresh timing for the records cache."""
from datetime import datetime


class Scheduler:
    """Computes delays, in seconds, until the next refresh."""

    def __init__(self, interval: float = 60 * 60):
        if interval <= 0:
            raise ValueError(f"Refresh interval must be positive, got {interval}")
        self.interval = interval

    def initial_delay(self, updated_at: datetime, now: datetime) -> float:
        """Delay after startup, counting time since the last successful refresh.

        A snapshot refreshed 10 minutes ago with a 1 hour interval is next
        refreshed in 50 minutes; one older than the interval is refreshed
        immediately.
        """
        # Clock skew can put updated_at in the future; never wait past one interval
        elapsed = max((now - updated_at).total_seconds(), 0.0)
        return max(self.interval - elapsed, 0.0)

    def next_delay(self) -> float:
        """Delay after any refresh attempt, successful or not."""
        return self.interval
