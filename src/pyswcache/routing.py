"""Request classification.

Each request is dispatched to exactly one strategy. Rules are evaluated in
order and the first match wins:

1. cross-origin: bypass
2. path under the API prefix: network-first, dynamic partition
3. image: cache-first, image partition
4. document: network-first with offline fallback, dynamic partition
5. style, script, font: cache-first, static partition
6. anything else: network-first, dynamic partition
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pyswcache.config import SwCacheConfig
from pyswcache.models.http import Destination, Request

_STATIC_DESTINATIONS: frozenset[Destination] = frozenset({Destination.STYLE, Destination.SCRIPT, Destination.FONT})


class Strategy(StrEnum):
    BYPASS = "bypass"
    CACHE_FIRST = "cache-first"
    NETWORK_FIRST = "network-first"
    NETWORK_FIRST_OFFLINE = "network-first-offline"


@dataclass(frozen=True, slots=True)
class Route:
    """Strategy plus the partition it runs against (``None`` for bypass)."""

    strategy: Strategy
    partition: str | None = None
    rule: str = ""


def classify(request: Request, config: SwCacheConfig) -> Route:
    if request.origin != config.origin:
        return Route(Strategy.BYPASS, rule="cross-origin")

    if request.path.startswith(config.api_prefix):
        return Route(Strategy.NETWORK_FIRST, config.dynamic_cache, rule="api")

    destination = request.destination
    if destination == Destination.IMAGE:
        return Route(Strategy.CACHE_FIRST, config.image_cache, rule="image")

    if destination == Destination.DOCUMENT:
        return Route(Strategy.NETWORK_FIRST_OFFLINE, config.dynamic_cache, rule="document")

    if destination in _STATIC_DESTINATIONS:
        return Route(Strategy.CACHE_FIRST, config.static_cache, rule="static-asset")

    return Route(Strategy.NETWORK_FIRST, config.dynamic_cache, rule="default")
