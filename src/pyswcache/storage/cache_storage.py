"""Named partitions, as provided by the host."""

from __future__ import annotations

import logging

from pyswcache.models.http import Request, Response
from pyswcache.storage.partition import Partition

_logger = logging.getLogger(__name__)


class CacheStorage:
    """Registry of named :class:`Partition` objects.

    Partitions are created lazily by :meth:`open` and destroyed wholesale by
    :meth:`delete`. A partition handle obtained before a delete keeps its
    entries, but the storage no longer serves it.
    """

    def __init__(self, *, max_entries: int | None = None) -> None:
        self._max_entries = max_entries
        self._partitions: dict[str, Partition] = {}

    async def open(self, name: str) -> Partition:
        partition = self._partitions.get(name)
        if partition is None:
            partition = Partition(name, max_entries=self._max_entries)
            self._partitions[name] = partition
            _logger.debug("Created partition %s", name)
        return partition

    async def has(self, name: str) -> bool:
        return name in self._partitions

    async def delete(self, name: str) -> bool:
        removed = self._partitions.pop(name, None) is not None
        if removed:
            _logger.debug("Deleted partition %s", name)
        return removed

    async def keys(self) -> list[str]:
        return list(self._partitions)

    async def match(self, request: Request) -> Response | None:
        """Look *request* up across every partition, oldest partition first."""
        for partition in list(self._partitions.values()):
            response = await partition.match(request)
            if response is not None:
                return response
        return None
