"""Periodically refreshed, file-backed cache of WCA regional records.

A single background thread fetches records from the WCA API on a fixed
interval, publishes them for readers and writes them to a local file.
Keeping the last snapshot on disk lets the cache come up with data even
when the WCA API is down while the app restarts.
"""
import logging
import threading
import time
from datetime import datetime
from typing import Callable, Iterable, Mapping, Optional, Protocol

from src.config.settings import Settings, get_settings

from .errors import (
    CorruptStateError,
    RecordsFetchError,
    StartupError,
    StoreReadError,
    StoreWriteError,
)
from .fetcher import WcaRecordsFetcher
from .models import Record, RecordMapKey, RecordsIndex, Snapshot, records_to_map, utc_now
from .scheduler import Scheduler
from .store import DurableStore
from .view import PublishedView

logger = logging.getLogger(__name__)

CORRUPT_STATE_POLICIES = ("abort", "refetch")


class RecordsFetcher(Protocol):
    def fetch_regional_records(self) -> list[Record]: ...


class RecordsStore:
    """Caching layer on top of a records fetcher.

    Readers call ``get_regional_records`` and ``get_regional_records_map``
    from any thread; those never block on a refresh in progress. All
    mutation happens in ``refresh``, which is serialized and normally runs
    on the store's own thread.
    """

    def __init__(
        self,
        fetcher: RecordsFetcher,
        store: DurableStore,
        derive: Callable[[Iterable[Record]], RecordsIndex] = records_to_map,
        interval: float = 60 * 60,
        corrupt_state_policy: str = "abort",
        clock: Callable[[], datetime] = utc_now,
    ):
        if corrupt_state_policy not in CORRUPT_STATE_POLICIES:
            raise ValueError(
                f"corrupt_state_policy must be one of {CORRUPT_STATE_POLICIES}, "
                f"got {corrupt_state_policy!r}"
            )
        self.fetcher = fetcher
        self.store = store
        self.scheduler = Scheduler(interval)
        self.corrupt_state_policy = corrupt_state_policy
        self._derive = derive
        self._clock = clock

        self._view = PublishedView()
        self._refresh_lock = threading.Lock()
        self._wakeup = threading.Event()
        self._stopping = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # Delay last armed on the timer and the monotonic time it fires
        self.scheduled_delay: Optional[float] = None
        self._next_refresh_at: Optional[float] = None

    # Read API

    def snapshot(self) -> Snapshot:
        """Return the currently served snapshot.

        Raises:
            RuntimeError: If the store has no data yet (not started)
        """
        snapshot = self._view.get()
        if snapshot is None:
            raise RuntimeError("Records store has not been started")
        return snapshot

    def get_regional_records(self) -> tuple[Record, ...]:
        """Return the cached regional records in fetch order."""
        return self.snapshot().records

    def get_regional_records_map(self) -> Mapping[RecordMapKey, Record]:
        """Return a read-only view of the cached records index."""
        return self.snapshot().index

    @property
    def is_ready(self) -> bool:
        return self._view.is_ready

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_refresh_in(self) -> Optional[float]:
        """Seconds until the next scheduled refresh, or None if not scheduled."""
        if self._next_refresh_at is None:
            return None
        return max(self._next_refresh_at - time.monotonic(), 0.0)

    # Lifecycle

    def start(self) -> None:
        """Load or fetch the initial snapshot and start the refresh thread.

        Raises:
            StartupError: If there is no usable snapshot to serve
            RuntimeError: If a refresh thread from this store is still running
        """
        if self._thread is not None:
            if self._thread.is_alive():
                raise RuntimeError("Records store already started")
            self._thread = None

        delay = self._initialize()
        # Per-run stop event; a thread left over from an earlier run keeps its own
        self._stopping = threading.Event()
        self._wakeup.clear()
        self._schedule(delay)
        self._thread = threading.Thread(
            target=self._run,
            args=(delay, self._stopping),
            name="records-store",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> bool:
        """Stop the refresh thread. The last snapshot stays readable.

        Returns False if the thread is still finishing a refresh after
        ``timeout``; it exits once that cycle completes.
        """
        if self._thread is None:
            return True
        self._stopping.set()
        self._wakeup.set()
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Records refresh thread still running after %s seconds", timeout)
            return False
        self._thread = None
        self._next_refresh_at = None
        return True

    def request_refresh(self) -> None:
        """Ask the refresh thread to run a cycle now instead of waiting."""
        self._wakeup.set()

    def refresh(self) -> bool:
        """Run one fetch, publish and persist cycle.

        On failure the current snapshot stays published. Returns True if
        fresh records were published.
        """
        try:
            self._update()
        except RecordsFetchError as e:
            logger.warning("Update failed: %s.", e)
            return False
        except Exception:
            logger.exception("Update failed.")
            return False
        logger.info("Updated records.")
        return True

    # Internals

    def _initialize(self) -> float:
        """Publish the initial snapshot and return the delay before the first refresh."""
        try:
            snapshot = self.store.read()
        except CorruptStateError as e:
            if self.corrupt_state_policy == "abort":
                raise StartupError(f"Corrupt records state: {e}") from e
            logger.error("Ignoring corrupt records state: %s", e)
            snapshot = None
        except StoreReadError as e:
            raise StartupError(f"Cannot read records state: {e}") from e

        if snapshot is not None:
            # Re-derive so the index always comes from this store's derivation
            snapshot = Snapshot.build(
                snapshot.records, snapshot.updated_at, derive=self._derive
            )
            self._view.publish(snapshot)
            logger.info(
                "Loaded %d records updated at %s",
                snapshot.record_count,
                snapshot.updated_at.isoformat(),
            )
            return self.scheduler.initial_delay(snapshot.updated_at, self._clock())

        try:
            self._update()
        except Exception as e:
            raise StartupError(f"No stored records and initial fetch failed: {e}") from e
        logger.info("Updated records.")
        return self.scheduler.next_delay()

    def _update(self) -> Snapshot:
        with self._refresh_lock:
            logger.info("Fetching fresh records.")
            records = self.fetcher.fetch_regional_records()
            snapshot = Snapshot.build(records, self._clock(), derive=self._derive)
            self._view.publish(snapshot)

            try:
                self.store.write(snapshot)
            except StoreWriteError as e:
                # Stay available with the new records; durability catches up next cycle
                logger.error("Failed to persist records: %s", e)
            return snapshot

    def _schedule(self, delay: float) -> None:
        self.scheduled_delay = delay
        self._next_refresh_at = time.monotonic() + delay
        logger.debug("Next records update in %.0f seconds", delay)

    def _run(self, delay: float, stopping: threading.Event) -> None:
        while not stopping.is_set():
            self._wakeup.wait(delay)
            if stopping.is_set():
                return
            self._wakeup.clear()

            self.refresh()

            delay = self.scheduler.next_delay()
            self._schedule(delay)


def create_records_store(settings: Optional[Settings] = None) -> RecordsStore:
    """Build the records store described by the application settings."""
    settings = settings or get_settings()
    fetcher = WcaRecordsFetcher(
        api_url=settings.wca_api_url, timeout=settings.wca_api_timeout
    )
    return RecordsStore(
        fetcher=fetcher,
        store=DurableStore(settings.state_path),
        interval=settings.records_update_interval_sec,
        corrupt_state_policy=settings.records_corrupt_state_policy,
    )
