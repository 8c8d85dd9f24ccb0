"""Exceptions raised by the regional records cache."""


class RecordsStoreError(Exception):
    """Base error for the records cache."""

    pass


class RecordsFetchError(RecordsStoreError):
    """Error fetching regional records from the WCA API."""

    pass


class CorruptStateError(RecordsStoreError):
    """The durable state file exists but cannot be decoded."""

    pass


class StoreReadError(RecordsStoreError):
    """The durable state file exists but cannot be read."""

    pass


class StoreWriteError(RecordsStoreError):
    """The durable state file could not be written."""

    pass


class StartupError(RecordsStoreError):
    """The records cache has no data it can serve and cannot start."""

    pass
