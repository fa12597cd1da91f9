"""Background replay of pending mutations.

A pending mutation is any request stored in the dynamic partition whose URL
contains one of the sync patterns for a tag. Replay is at-least-once: an
entry is removed only after the network accepted it, and a failed replay
leaves it for the next sync signal. No idempotency key is attached; the
receiving endpoint deduplicates.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pyswcache._redact import redact_url
from pyswcache._transport import Fetcher
from pyswcache.exceptions import NetworkError
from pyswcache.models.http import Request, Response
from pyswcache.storage.partition import Partition

_logger = logging.getLogger(__name__)

QUEUED_HEADER = "X-Swcache-Queued"


@dataclass(slots=True)
class SyncReport:
    """Outcome of one replay pass."""

    tag: str
    replayed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed


def is_pending_mutation(request: Request, patterns: Iterable[str]) -> bool:
    return any(pattern in request.url for pattern in patterns)


async def queue_mutation(partition: Partition, request: Request) -> Response:
    """Persist *request* for a later replay.

    The stored response is a synthetic ``202`` marked with
    ``X-Swcache-Queued`` and is also what the caller gets back.
    """
    response = Response.from_text(
        "queued",
        status=202,
        headers={QUEUED_HEADER: "1"},
        url=request.url,
    )
    await partition.put(request, response)
    _logger.info("Queued %s %s for background sync", request.method, redact_url(request.url))
    return response


async def replay_pending(
    tag: str,
    partition: Partition,
    patterns: Iterable[str],
    *,
    fetcher: Fetcher,
) -> SyncReport:
    """Replay every pending mutation in *partition* matching *patterns*."""
    patterns = tuple(patterns)
    report = SyncReport(tag=tag)

    requests = await partition.keys()
    pending = [r for r in requests if is_pending_mutation(r, patterns)]
    _logger.info("Syncing %d pending request(s) for %s", len(pending), tag)

    for request in pending:
        url = redact_url(request.url)
        try:
            await fetcher.fetch(request)
        except NetworkError as exc:
            _logger.warning("Failed to sync %s %s: %s", request.method, url, exc)
            report.failed.append(request.url)
            continue
        report.replayed.append(request.url)
        if await partition.delete_if_unchanged(request):
            _logger.debug("Synced %s %s", request.method, url)
        else:
            _logger.debug("Synced %s %s, newer entry left queued", request.method, url)

    _logger.info(
        "Sync %s complete: %d replayed, %d left queued",
        tag,
        len(report.replayed),
        len(report.failed),
    )
    return report
