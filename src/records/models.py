"""Regional record types and the immutable cache snapshot."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

RECORD_TYPES = ("single", "average")

# (record_key, event_id, type)
RecordMapKey = tuple[str, str, str]
RecordsIndex = dict[RecordMapKey, "Record"]


def utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Record:
    """Best known result for a region, event and result type.

    ``record_key`` is ``"WR"`` for world records, a continent id such as
    ``"_Europe"`` for continental records, or a WCA country id such as
    ``"Poland"`` for national records.
    """

    record_key: str
    event_id: str
    type: str
    attempt_result: int

    def __post_init__(self):
        """Validate record type."""
        if self.type not in RECORD_TYPES:
            raise ValueError(f"Record type must be one of {RECORD_TYPES}, got {self.type!r}")

    @property
    def map_key(self) -> RecordMapKey:
        return (self.record_key, self.event_id, self.type)


def records_to_map(records: Iterable[Record]) -> RecordsIndex:
    """Index records by (record_key, event_id, type). Later duplicates win."""
    return {record.map_key: record for record in records}


@dataclass(frozen=True)
class Snapshot:
    """Records, their derived index and the time of the refresh that produced them."""

    records: tuple[Record, ...]
    index: Mapping = field(repr=False, hash=False)
    updated_at: datetime

    def __post_init__(self):
        """Freeze the index so readers cannot mutate a published snapshot."""
        if not isinstance(self.index, MappingProxyType):
            object.__setattr__(self, "index", MappingProxyType(self.index))

    @classmethod
    def build(
        cls,
        records: Iterable[Record],
        updated_at: datetime,
        derive: Callable[[Iterable[Record]], RecordsIndex] = records_to_map,
    ) -> "Snapshot":
        """Create a snapshot whose index is derived from ``records``."""
        records = tuple(records)
        return cls(records=records, index=derive(records), updated_at=updated_at)

    @property
    def record_count(self) -> int:
        return len(self.records)
