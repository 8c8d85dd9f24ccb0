"""Durable local storage for the records snapshot.

The file format is private to this module. It only has to survive a
round trip through ``write`` and ``read`` on the same code version; the
file is safe to delete and must not be edited by hand.
"""
import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, Optional

from pydantic import TypeAdapter

from .errors import CorruptStateError, StoreReadError, StoreWriteError
from .models import Record, RecordsIndex, Snapshot, records_to_map

logger = logging.getLogger(__name__)

STATE_FORMAT_VERSION = 1


@dataclass
class _StoredState:
    """On-disk shape of a snapshot. The index is re-derived on load."""

    version: int
    records: tuple[Record, ...]
    updated_at: datetime


_state_adapter = TypeAdapter(_StoredState)


class DurableStore:
    """Reads and writes a single snapshot file."""

    def __init__(
        self,
        path: Path,
        derive: Callable[[Iterable[Record]], RecordsIndex] = records_to_map,
    ):
        self.path = Path(path)
        self._derive = derive

    def encode(self, snapshot: Snapshot) -> bytes:
        state = _StoredState(
            version=STATE_FORMAT_VERSION,
            records=snapshot.records,
            updated_at=snapshot.updated_at,
        )
        return _state_adapter.dump_json(state)

    def decode(self, data: bytes) -> Snapshot:
        """Decode file contents into a snapshot.

        Raises:
            CorruptStateError: If the data is not a snapshot written by this version
        """
        try:
            state = _state_adapter.validate_json(data)
        except ValueError as e:
            # pydantic ValidationError is a ValueError
            raise CorruptStateError(f"Cannot decode {self.path}: {e}")

        if state.version != STATE_FORMAT_VERSION:
            raise CorruptStateError(
                f"Unsupported state version {state.version} in {self.path}"
            )
        if state.updated_at.tzinfo is None:
            raise CorruptStateError(f"Missing timezone on updated_at in {self.path}")

        return Snapshot.build(state.records, state.updated_at, derive=self._derive)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> Optional[Snapshot]:
        """Load the stored snapshot.

        Returns:
            The snapshot, or None if no state file exists

        Raises:
            StoreReadError: If the file exists but cannot be read
            CorruptStateError: If the file cannot be decoded
        """
        logger.info("Reading state from file %s", self.path)
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreReadError(f"Cannot read {self.path}: {e}") from e
        return self.decode(data)

    def write(self, snapshot: Snapshot) -> None:
        """Replace the state file with ``snapshot``.

        The data is written to a temporary file in the same directory and
        renamed over the target, so readers never see a partial file.

        Raises:
            StoreWriteError: If the file cannot be written
        """
        logger.info("Writing state to file %s", self.path)
        data = self.encode(snapshot)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreWriteError(f"Cannot write {self.path}: {e}") from e
