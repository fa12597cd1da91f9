from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from pyswcache.config import SwCacheConfig
from pyswcache.exceptions import NetworkError
from pyswcache.models.http import Request, Response
from pyswcache.worker import ServiceWorker

ORIGIN = "http://shop.test"
OFFLINE_HTML = "<html><body>You are offline</body></html>"


@dataclass
class FakeNetwork:
    """In-memory stand-in for the network.

    Unknown URLs answer 404. ``online = False`` makes every fetch raise,
    and ``failing_urls`` fails individual URLs.
    """

    routes: dict[tuple[str, str], Response] = field(default_factory=dict)
    online: bool = True
    failing_urls: set[str] = field(default_factory=set)
    calls: list[Request] = field(default_factory=list)

    def serve(
        self,
        path: str,
        body: str = "",
        *,
        status: int = 200,
        method: str = "GET",
        content_type: str = "text/html",
    ) -> str:
        url = f"{ORIGIN}{path}"
        self.routes[(method, url)] = Response.from_text(body, status=status, content_type=content_type, url=url)
        return url

    def calls_to(self, url: str) -> int:
        return sum(1 for request in self.calls if request.url == url)

    async def fetch(self, request: Request) -> Response:
        self.calls.append(request)
        if not self.online or request.url in self.failing_urls:
            raise NetworkError("network unreachable", url=request.url)
        response = self.routes.get(request.cache_key)
        if response is None:
            return Response.from_text("not found", status=404, url=request.url)
        return response


@pytest.fixture
def config() -> SwCacheConfig:
    return SwCacheConfig(
        cache_version="shop-v2",
        origin=ORIGIN,
        static_assets=("/", "/offline.html"),
    )


@pytest.fixture
def network() -> FakeNetwork:
    fake = FakeNetwork()
    fake.serve("/", "<html><body>Home</body></html>")
    fake.serve("/offline.html", OFFLINE_HTML)
    return fake


@pytest.fixture
def worker(config: SwCacheConfig, network: FakeNetwork) -> ServiceWorker:
    return ServiceWorker(config, network)
