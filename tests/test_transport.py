from __future__ import annotations

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from pyswcache._transport import HttpFetcher
from pyswcache.exceptions import NetworkError
from pyswcache.models.http import Request


async def _echo(request: web.Request) -> web.Response:
    body = await request.read()
    return web.Response(
        status=201 if request.method == "POST" else 200,
        text=f"{request.method} {request.path_qs} {body.decode()}",
        headers={"X-Echo": "1"},
    )


async def _missing(_request: web.Request) -> web.Response:
    return web.Response(status=404, text="nope")


def _app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/echo", _echo)
    app.router.add_get("/missing", _missing)
    return app


@pytest.mark.asyncio
async def test_fetch_snapshots_status_headers_and_body() -> None:
    async with TestServer(_app()) as server, aiohttp.ClientSession() as http:
        fetcher = HttpFetcher(http, timeout=5)
        url = str(server.make_url("/echo?q=1"))

        response = await fetcher.fetch(Request(url=url, method="POST", body=b"cart"))

    assert response.status == 201
    assert response.text() == "POST /echo?q=1 cart"
    assert response.headers["X-Echo"] == "1"
    assert "Content-Length" not in response.headers


@pytest.mark.asyncio
async def test_http_error_status_is_a_response_not_an_error() -> None:
    async with TestServer(_app()) as server, aiohttp.ClientSession() as http:
        response = await HttpFetcher(http).fetch(Request(url=str(server.make_url("/missing"))))

    assert response.status == 404
    assert not response.ok


@pytest.mark.asyncio
async def test_unreachable_host_raises_network_error() -> None:
    server = TestServer(_app())
    await server.start_server()
    url = str(server.make_url("/echo"))
    await server.close()

    async with aiohttp.ClientSession() as http:
        with pytest.raises(NetworkError) as exc_info:
            await HttpFetcher(http, timeout=5).fetch(Request(url=url))

    assert exc_info.value.url == url
