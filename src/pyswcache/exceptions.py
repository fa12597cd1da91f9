"""Custom exception hierarchy for pyswcache."""

from __future__ import annotations


class SwCacheError(Exception):
    """Base exception for all pyswcache errors."""


class SwCacheConfigError(SwCacheError):
    """Invalid or missing configuration."""


class NetworkError(SwCacheError):
    """Transport-level failure (connection refused, DNS, timeout).

    Mirrors a rejected ``fetch()``: an HTTP error status is *not* a
    network error and comes back as a normal response.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class InstallError(SwCacheError):
    """Precaching the static manifest failed; nothing was stored."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class CacheStorageError(SwCacheError):
    """A partition read or write failed."""


class CacheQuotaExceededError(CacheStorageError):
    """A partition is full and refused a new entry.

    Raised by :meth:`pyswcache.storage.Partition.put` when the partition
    was created with ``max_entries`` and the key is not already present.
    Strategies treat it as non-fatal: the response still reaches the caller.
    """

    def __init__(self, message: str, *, partition: str = "") -> None:
        self.partition = partition
        super().__init__(message)


class WorkerStateError(SwCacheError):
    """Lifecycle operation attempted in the wrong state."""
