"""Local caching proxy in front of the storefront origin.

Every request the proxy receives is rebuilt as a :class:`Request` against
the configured origin and routed through the worker. Browsers send the
resource kind in ``Sec-Fetch-Dest``; that header becomes the request
destination.

Control endpoints live under ``/__sw/``:

``POST /__sw/message``      JSON body handed to ``handle_message``
``POST /__sw/sync/{tag}``   background sync signal
``POST /__sw/push``         text body handed to ``handle_push``
``GET  /__sw/status``       worker state and partition sizes
"""

from __future__ import annotations

import json
import logging
from typing import Any

from aiohttp import web

from pyswcache.exceptions import NetworkError
from pyswcache.models.http import Destination, Request
from pyswcache.worker import ServiceWorker

_logger = logging.getLogger(__name__)

WORKER_KEY = web.AppKey("worker", ServiceWorker)

_HOP_BY_HOP: frozenset[str] = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "transfer-encoding",
        "upgrade",
        "content-length",
        "host",
    }
)


def _strip_hop_by_hop(headers: Any) -> dict[str, str]:
    return {k: v for k, v in headers.items() if k.lower() not in _HOP_BY_HOP}


async def _build_request(worker: ServiceWorker, http_request: web.Request) -> Request:
    body = await http_request.read() if http_request.can_read_body else b""
    return Request(
        url=f"{worker.config.origin}{http_request.rel_url}",
        method=http_request.method,
        headers=_strip_hop_by_hop(http_request.headers),
        body=body,
        destination=Destination(http_request.headers.get("Sec-Fetch-Dest", "")),
    )


async def handle_proxy(http_request: web.Request) -> web.StreamResponse:
    worker = http_request.app[WORKER_KEY]
    request = await _build_request(worker, http_request)
    try:
        response = await worker.fetch(request)
    except NetworkError as exc:
        _logger.warning("No response for %s: %s", request.url, exc)
        return web.Response(status=502, text="Bad Gateway: origin unreachable and nothing cached\n")
    return web.Response(status=response.status, headers=_strip_hop_by_hop(response.headers), body=response.body)


async def handle_message(http_request: web.Request) -> web.Response:
    worker = http_request.app[WORKER_KEY]
    try:
        data = await http_request.json()
    except json.JSONDecodeError:
        raise web.HTTPBadRequest(text="message body must be JSON\n") from None
    await worker.handle_message(data)
    return web.json_response({"state": worker.state.value})


async def handle_sync(http_request: web.Request) -> web.Response:
    worker = http_request.app[WORKER_KEY]
    report = await worker.handle_sync(http_request.match_info["tag"])
    if report is None:
        return web.json_response({"ignored": True})
    return web.json_response({"tag": report.tag, "replayed": report.replayed, "failed": report.failed})


async def handle_push(http_request: web.Request) -> web.Response:
    worker = http_request.app[WORKER_KEY]
    text = await http_request.text() if http_request.can_read_body else None
    notification = await worker.handle_push(text or None)
    return web.json_response({"id": notification.id, "title": notification.title, "body": notification.options.body})


async def handle_status(http_request: web.Request) -> web.Response:
    worker = http_request.app[WORKER_KEY]
    partitions: dict[str, int] = {}
    for name in await worker.storage.keys():
        partitions[name] = len(await worker.storage.open(name))
    return web.json_response(
        {
            "id": worker.id,
            "version": worker.config.cache_version,
            "state": worker.state.value,
            "partitions": partitions,
        }
    )


async def _drain_writes(app: web.Application) -> None:
    await app[WORKER_KEY].drain()


def create_app(worker: ServiceWorker) -> web.Application:
    app = web.Application()
    app[WORKER_KEY] = worker
    app.router.add_post("/__sw/message", handle_message)
    app.router.add_post("/__sw/sync/{tag}", handle_sync)
    app.router.add_post("/__sw/push", handle_push)
    app.router.add_get("/__sw/status", handle_status)
    app.router.add_route("*", "/{tail:.*}", handle_proxy)
    app.on_shutdown.append(_drain_writes)
    return app
