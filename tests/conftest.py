"""Shared pytest fixtures for tests."""
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from src.records.models import Record
from src.records.store import DurableStore


class FakeClock:
    """Controllable replacement for utc_now."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def clock():
    return FakeClock(datetime(2025, 6, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def record_wr_single():
    return Record(record_key="WR", event_id="333", type="single", attempt_result=305)


@pytest.fixture
def record_wr_average():
    return Record(record_key="WR", event_id="333", type="average", attempt_result=421)


@pytest.fixture
def sample_records(record_wr_single, record_wr_average):
    """World, continental and national records in fetch order."""
    return [
        record_wr_single,
        record_wr_average,
        Record(record_key="_Europe", event_id="333", type="single", attempt_result=347),
        Record(record_key="Poland", event_id="222", type="average", attempt_result=122),
    ]


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "tmp" / "record-store.test.data"


@pytest.fixture
def durable_store(state_path):
    return DurableStore(state_path)


@pytest.fixture
def mock_fetcher(sample_records):
    fetcher = Mock()
    fetcher.fetch_regional_records.return_value = list(sample_records)
    return fetcher
