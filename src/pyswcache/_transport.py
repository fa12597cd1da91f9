"""Network fetcher used by the strategies and by background replay."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import aiohttp

from pyswcache._constants import USER_AGENT
from pyswcache._redact import redact_url
from pyswcache.exceptions import NetworkError
from pyswcache.models.http import Request, Response

_logger = logging.getLogger(__name__)

# Headers that describe the wire encoding rather than the stored body.
# aiohttp already decompressed and de-chunked what we read.
_WIRE_HEADERS: frozenset[str] = frozenset(
    {"content-encoding", "content-length", "transfer-encoding", "connection", "keep-alive"}
)


class Fetcher(Protocol):
    """Structural fetch interface used by strategies and replay.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpFetcher`) concrete.

    Implementations raise :class:`~pyswcache.exceptions.NetworkError` when
    the request never produced a response. HTTP error statuses come back
    as ordinary responses.
    """

    async def fetch(self, request: Request) -> Response:
        ...


class HttpFetcher:
    """Fetcher backed by an ``aiohttp.ClientSession``."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 30.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def fetch(self, request: Request) -> Response:
        headers = {k: v for k, v in request.headers.items() if k.lower() not in _WIRE_HEADERS and k.lower() != "host"}
        headers.setdefault("User-Agent", USER_AGENT)

        _logger.debug("%s %s", request.method, redact_url(request.url))

        try:
            async with self._http.request(
                request.method,
                request.url,
                headers=headers,
                data=request.body or None,
                timeout=self._timeout,
            ) as resp:
                body = await resp.read()
                return Response(
                    status=resp.status,
                    headers={k: v for k, v in resp.headers.items() if k.lower() not in _WIRE_HEADERS},
                    body=body,
                    url=str(resp.url),
                )
        except aiohttp.ClientResponseError as exc:
            raise NetworkError(
                f"{request.method} {redact_url(request.url)} failed: {exc.message}",
                url=request.url,
                status_code=exc.status,
            ) from exc
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise NetworkError(
                f"{request.method} {redact_url(request.url)} failed: {exc!r}",
                url=request.url,
            ) from exc
