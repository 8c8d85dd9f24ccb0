"""Tests for the durable records store."""
import json
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from src.records.errors import CorruptStateError, StoreReadError, StoreWriteError
from src.records.models import Record, Snapshot, records_to_map
from src.records.store import DurableStore


@pytest.fixture
def snapshot(sample_records):
    return Snapshot.build(
        sample_records, datetime(2025, 6, 1, 11, 50, 0, 123456, tzinfo=timezone.utc)
    )


class TestEncoding:
    """Tests for snapshot encode/decode."""

    def test_round_trip(self, durable_store, snapshot):
        decoded = durable_store.decode(durable_store.encode(snapshot))

        assert decoded == snapshot
        assert decoded.records == snapshot.records
        assert decoded.index == records_to_map(snapshot.records)

    def test_round_trip_empty(self, durable_store):
        snapshot = Snapshot.build([], datetime(2025, 1, 1, tzinfo=timezone.utc))

        decoded = durable_store.decode(durable_store.encode(snapshot))

        assert decoded == snapshot
        assert decoded.records == ()
        assert decoded.index == {}

    def test_round_trip_large(self, durable_store):
        records = [
            Record(
                record_key=f"Country{i % 200}",
                event_id=f"event{i % 17}",
                type="single" if i % 2 else "average",
                attempt_result=i,
            )
            for i in range(20000)
        ]
        snapshot = Snapshot.build(records, datetime(2025, 1, 1, tzinfo=timezone.utc))

        decoded = durable_store.decode(durable_store.encode(snapshot))

        assert decoded == snapshot
        assert decoded.records[-1].attempt_result == 19999

    def test_decode_invalid_json(self, durable_store):
        with pytest.raises(CorruptStateError):
            durable_store.decode(b"not json at all")

    def test_decode_wrong_shape(self, durable_store):
        with pytest.raises(CorruptStateError):
            durable_store.decode(json.dumps({"records": "nope"}).encode())

    def test_decode_invalid_record_type(self, durable_store, snapshot):
        data = json.loads(durable_store.encode(snapshot))
        data["records"][0]["type"] = "mean"

        with pytest.raises(CorruptStateError):
            durable_store.decode(json.dumps(data).encode())

    def test_decode_unknown_version(self, durable_store, snapshot):
        data = json.loads(durable_store.encode(snapshot))
        data["version"] = 99

        with pytest.raises(CorruptStateError, match="version"):
            durable_store.decode(json.dumps(data).encode())


class TestDurableStore:
    """Tests for reading and writing the state file."""

    def test_read_missing_file(self, durable_store):
        assert durable_store.exists() is False
        assert durable_store.read() is None

    def test_write_creates_parent_directories(self, durable_store, state_path, snapshot):
        assert not state_path.parent.exists()

        durable_store.write(snapshot)

        assert state_path.exists()
        assert durable_store.read() == snapshot

    def test_write_overwrites_previous(self, durable_store, snapshot, record_wr_single):
        durable_store.write(snapshot)
        newer = Snapshot.build(
            [record_wr_single], datetime(2025, 6, 1, 12, 50, tzinfo=timezone.utc)
        )

        durable_store.write(newer)

        assert durable_store.read() == newer

    def test_write_leaves_no_temp_files(self, durable_store, state_path, snapshot):
        durable_store.write(snapshot)
        durable_store.write(snapshot)

        assert [p.name for p in state_path.parent.iterdir()] == [state_path.name]

    def test_read_corrupt_file(self, durable_store, state_path):
        state_path.parent.mkdir(parents=True)
        state_path.write_bytes(b"garbage")

        with pytest.raises(CorruptStateError):
            durable_store.read()

    def test_read_unreadable_path(self, durable_store, state_path):
        state_path.mkdir(parents=True)

        with pytest.raises(StoreReadError, match="Cannot read"):
            durable_store.read()

    def test_read_permission_error_is_not_corruption(self, durable_store, snapshot):
        durable_store.write(snapshot)

        path_type = type(durable_store.path)
        with patch.object(path_type, "read_bytes", side_effect=PermissionError("denied")):
            with pytest.raises(StoreReadError, match="denied"):
                durable_store.read()

    def test_read_truncated_file(self, durable_store, state_path, snapshot):
        durable_store.write(snapshot)
        state_path.write_bytes(state_path.read_bytes()[:40])

        with pytest.raises(CorruptStateError):
            durable_store.read()

    def test_read_uses_derivation(self, state_path, snapshot):
        DurableStore(state_path).write(snapshot)
        store = DurableStore(state_path, derive=lambda records: {"count": len(records)})

        assert store.read().index == {"count": 4}

    def test_write_failure_raises_store_write_error(self, durable_store, snapshot):
        with patch("src.records.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StoreWriteError, match="disk full"):
                durable_store.write(snapshot)

        assert durable_store.exists() is False
        assert list(durable_store.path.parent.iterdir()) == []

    def test_write_to_unwritable_location(self, tmp_path, snapshot):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = DurableStore(blocker / "record-store.data")

        with pytest.raises(StoreWriteError):
            store.write(snapshot)
