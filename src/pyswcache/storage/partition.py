"""A single named cache partition.

A partition maps request identity (method + URL) to the stored request and
its response snapshot. Writes overwrite: the last ``put`` to complete wins.
"""

from __future__ import annotations

import logging

from pyswcache.exceptions import CacheQuotaExceededError
from pyswcache.models.http import Request, Response

_logger = logging.getLogger(__name__)


class Partition:
    """Async key-value store for request/response pairs.

    All operations are coroutines so callers treat every read and write as
    a suspension point, the same way they treat a network fetch.
    """

    def __init__(self, name: str, *, max_entries: int | None = None) -> None:
        self._name = name
        self._max_entries = max_entries
        self._entries: dict[tuple[str, str], tuple[Request, Response]] = {}

    @property
    def name(self) -> str:
        return self._name

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Partition(name={self._name!r}, entries={len(self._entries)})"

    async def match(self, request: Request) -> Response | None:
        entry = self._entries.get(request.cache_key)
        if entry is None:
            return None
        return entry[1].clone()

    async def put(self, request: Request, response: Response) -> None:
        key = request.cache_key
        if self._max_entries is not None and key not in self._entries and len(self._entries) >= self._max_entries:
            raise CacheQuotaExceededError(
                f"partition {self._name} is full ({self._max_entries} entries)",
                partition=self._name,
            )
        self._entries[key] = (request, response)
        _logger.debug("Stored %s %s in %s", request.method, request.url, self._name)

    async def delete(self, request: Request) -> bool:
        return self._entries.pop(request.cache_key, None) is not None

    async def delete_if_unchanged(self, request: Request) -> bool:
        """Delete the entry only while the stored request is *request* itself.

        A newer ``put`` for the same identity replaces the stored request
        object, and that entry is left in place.
        """
        entry = self._entries.get(request.cache_key)
        if entry is None or entry[0] is not request:
            return False
        del self._entries[request.cache_key]
        return True

    async def keys(self) -> list[Request]:
        """Stored requests, in insertion order."""
        return [request for request, _ in self._entries.values()]
