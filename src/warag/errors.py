"""Exception types raised by the sync pipeline."""

from typing import Any


class ConfigurationError(ValueError):
    """Raised when a setting or parameter makes an operation impossible."""


class SyncError(Exception):
    """Base class for failed sync attempts.

    Attributes:
        result: Partial SyncResult describing how far the attempt got, if known.
    """

    def __init__(self, message: str, result: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.result = result


class SourceFetchError(SyncError):
    """Raised when a Google Doc or Sheet cannot be read. Not retried."""

    def __init__(self, message: str, status_code: int | None = None, result: Any = None) -> None:
        super().__init__(message, result)
        self.status_code = status_code


class EmbeddingError(SyncError):
    """Raised when the embedding provider fails. Transient, retried with backoff."""

    def __init__(self, message: str, embedded: int = 0, result: Any = None) -> None:
        super().__init__(message, result)
        self.embedded = embedded


class PersistenceError(SyncError):
    """Raised when a storage read or write fails."""


class MappingNotFoundError(SyncError):
    """Raised when a tenant has no source linked."""


class SyncInProgressError(SyncError):
    """Raised when a sync for the same tenant and source is already running."""
