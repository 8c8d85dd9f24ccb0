"""Regional records cache: fetching, persistence and periodic refresh."""
from .actor import RecordsStore, create_records_store
from .errors import (
    CorruptStateError,
    RecordsFetchError,
    RecordsStoreError,
    StartupError,
    StoreReadError,
    StoreWriteError,
)
from .fetcher import WcaRecordsFetcher
from .models import Record, RecordsIndex, Snapshot, records_to_map
from .scheduler import Scheduler
from .store import DurableStore
from .view import PublishedView

__all__ = [
    "RecordsStore",
    "create_records_store",
    "CorruptStateError",
    "RecordsFetchError",
    "RecordsStoreError",
    "StartupError",
    "StoreReadError",
    "StoreWriteError",
    "WcaRecordsFetcher",
    "Record",
    "RecordsIndex",
    "Snapshot",
    "records_to_map",
    "Scheduler",
    "DurableStore",
    "PublishedView",
]
