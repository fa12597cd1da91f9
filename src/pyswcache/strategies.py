"""Fetch strategies.

Strategies are plain coroutines: they receive the partition handle they run
against, a :class:`~pyswcache._transport.Fetcher`, and the
:class:`PendingWrites` tracker that owns their background cache writes.
None of them read worker state.

Only a status-200 response is ever stored. The store happens in a
background task so the caller never waits on the partition write, and a
failed write is logged and dropped.
"""

from __future__ import annotations

import asyncio
import logging

from pyswcache._constants import CACHEABLE_STATUS
from pyswcache._redact import redact_url
from pyswcache._transport import Fetcher
from pyswcache.exceptions import NetworkError
from pyswcache.models.http import Request, Response
from pyswcache.storage.partition import Partition

_logger = logging.getLogger(__name__)

OFFLINE_FALLBACK_TEXT = "You are offline and this page has not been cached yet."


class PendingWrites:
    """Tracks fire-and-forget cache writes.

    Tasks are kept referenced until they finish so the event loop does not
    drop them half-way. :meth:`drain` lets tests and shutdown wait for the
    writes that are still in flight.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._tasks)

    def schedule(self, partition: Partition, request: Request, response: Response) -> asyncio.Task[None]:
        task = asyncio.create_task(
            self._put(partition, request, response),
            name=f"cache-put {partition.name}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @staticmethod
    async def _put(partition: Partition, request: Request, response: Response) -> None:
        try:
            await partition.put(request, response)
        except Exception:
            _logger.warning(
                "Cache write to %s failed for %s",
                partition.name,
                redact_url(request.url),
                exc_info=True,
            )

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)


def _store_if_cacheable(writes: PendingWrites, partition: Partition, request: Request, response: Response) -> None:
    if response.status == CACHEABLE_STATUS:
        writes.schedule(partition, request, response.clone())


async def cache_first(
    request: Request,
    partition: Partition,
    *,
    fetcher: Fetcher,
    writes: PendingWrites,
) -> Response:
    """Serve from *partition* when present, otherwise fetch and store.

    A cached entry is returned as-is, with no revalidation. If the fetch
    raises, the partition is consulted once more before the
    :class:`NetworkError` propagates.
    """
    cached = await partition.match(request)
    if cached is not None:
        _logger.debug("Cache hit in %s for %s", partition.name, redact_url(request.url))
        return cached

    try:
        response = await fetcher.fetch(request)
    except NetworkError:
        _logger.warning("Cache first strategy failed for %s", redact_url(request.url))
        cached = await partition.match(request)
        if cached is not None:
            return cached
        raise

    _store_if_cacheable(writes, partition, request, response)
    return response


async def network_first(
    request: Request,
    partition: Partition,
    *,
    fetcher: Fetcher,
    writes: PendingWrites,
) -> Response:
    """Fetch first; fall back to *partition* when the network fails."""
    try:
        response = await fetcher.fetch(request)
    except NetworkError:
        _logger.info("Network request failed, trying cache: %s", redact_url(request.url))
        cached = await partition.match(request)
        if cached is not None:
            return cached
        raise

    _store_if_cacheable(writes, partition, request, response)
    return response


async def network_first_with_offline(
    request: Request,
    partition: Partition,
    *,
    fetcher: Fetcher,
    writes: PendingWrites,
    offline_partition: Partition,
    offline_request: Request,
) -> Response:
    """Network-first for navigations; never raises on a network failure.

    When both the network and *partition* miss, the offline page stored in
    *offline_partition* is returned. If that page was never precached a
    plain-text 503 response stands in for it.
    """
    try:
        return await network_first(request, partition, fetcher=fetcher, writes=writes)
    except NetworkError:
        pass

    _logger.info("Showing offline page for %s", redact_url(request.url))
    offline = await offline_partition.match(offline_request)
    if offline is not None:
        return offline

    _logger.warning("Offline page %s is not cached", offline_request.url)
    return Response.from_text(OFFLINE_FALLBACK_TEXT, status=503, url=offline_request.url)
