class NacoClipError(Exception):
    """Base class for errors raised by NacoClip."""


class StorageError(NacoClipError):
    """A storage backend could not complete a read or write."""


class CapacityExceeded(NacoClipError):
    """Adding an entry would break the configured entry count or payload size limit."""

    def __init__(self, message: str, *, limit: int, actual: int):
        super().__init__(message)
        self.limit = limit
        self.actual = actual
