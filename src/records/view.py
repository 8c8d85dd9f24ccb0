"""Single-slot holder for the currently served snapshot."""
import threading
from typing import Optional

from .models import Snapshot


class PublishedView:
    """Holds the current snapshot for any number of readers.

    Readers never lock: ``get`` is a single attribute load, and ``publish``
    replaces the whole snapshot with a single attribute store, so a reader
    sees either the old or the new snapshot in full. The write lock only
    keeps publishers ordered; there is normally just one.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._snapshot = snapshot
        self._write_lock = threading.Lock()

    def get(self) -> Optional[Snapshot]:
        return self._snapshot

    def publish(self, snapshot: Snapshot) -> None:
        with self._write_lock:
            self._snapshot = snapshot

    @property
    def is_ready(self) -> bool:
        return self._snapshot is not None
