from __future__ import annotations

import pytest

from pyswcache.config import SwCacheConfig
from pyswcache.models.http import Destination, Request
from pyswcache.routing import Strategy, classify

CONFIG = SwCacheConfig(cache_version="shop-v2", origin="http://shop.test")


@pytest.mark.parametrize(
    ("url", "destination", "strategy", "partition"),
    [
        ("https://cdn.other.test/app.js", Destination.SCRIPT, Strategy.BYPASS, None),
        ("http://shop.test/api/products", Destination.EMPTY, Strategy.NETWORK_FIRST, "shop-v2-dynamic"),
        # The API rule wins over the resource kind.
        ("http://shop.test/api/images/1", Destination.IMAGE, Strategy.NETWORK_FIRST, "shop-v2-dynamic"),
        ("http://shop.test/img/shirt.jpg", Destination.IMAGE, Strategy.CACHE_FIRST, "shop-v2-images"),
        ("http://shop.test/collection", Destination.DOCUMENT, Strategy.NETWORK_FIRST_OFFLINE, "shop-v2-dynamic"),
        ("http://shop.test/assets/app.css", Destination.STYLE, Strategy.CACHE_FIRST, "shop-v2-static"),
        ("http://shop.test/assets/app.js", Destination.SCRIPT, Strategy.CACHE_FIRST, "shop-v2-static"),
        ("http://shop.test/fonts/a.woff2", Destination.FONT, Strategy.CACHE_FIRST, "shop-v2-static"),
        ("http://shop.test/manifest.json", Destination.MANIFEST, Strategy.NETWORK_FIRST, "shop-v2-dynamic"),
        ("http://shop.test/sitemap.xml", Destination.EMPTY, Strategy.NETWORK_FIRST, "shop-v2-dynamic"),
    ],
)
def test_classify(url: str, destination: Destination, strategy: Strategy, partition: str | None) -> None:
    route = classify(Request(url=url, destination=destination), CONFIG)
    assert route.strategy is strategy
    assert route.partition == partition


def test_unknown_destination_falls_back_to_default_route() -> None:
    request = Request(url="http://shop.test/worker.js", destination="sharedworker")  # type: ignore[arg-type]
    assert request.destination is Destination.EMPTY
    assert classify(request, CONFIG).rule == "default"
