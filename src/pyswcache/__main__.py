"""Run the caching proxy.

Usage
-----
::

    python -m pyswcache --origin https://shop.example.com --port 8081

Options::

    --origin URL         Storefront origin to front (default: $SWCACHE_ORIGIN)
    --version TAG        Cache version tag (default: $SWCACHE_VERSION)
    --host HOST          Listen address (default: 127.0.0.1)
    --port PORT          Listen port (default: 8081)
    -v, --verbose        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

import aiohttp
from aiohttp import web

from pyswcache._transport import HttpFetcher
from pyswcache.config import SwCacheConfig
from pyswcache.exceptions import InstallError, SwCacheConfigError
from pyswcache.proxy import create_app
from pyswcache.worker import start_worker, terminate_worker

_logger = logging.getLogger("pyswcache")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="pyswcache", description="Offline caching proxy for a storefront origin")
    parser.add_argument("--origin", help="Storefront origin to front")
    parser.add_argument("--version", dest="cache_version", help="Cache version tag")
    parser.add_argument("--host", default="127.0.0.1", help="Listen address")
    parser.add_argument("--port", type=int, default=8081, help="Listen port")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


async def _serve(config: SwCacheConfig, host: str, port: int) -> None:
    async with aiohttp.ClientSession() as http:
        worker = await start_worker(config, fetcher=HttpFetcher(http, timeout=config.fetch_timeout))
        runner = web.AppRunner(create_app(worker))
        await runner.setup()
        site = web.TCPSite(runner, host, port)
        await site.start()
        _logger.info("Serving %s on http://%s:%d (version %s)", config.origin, host, port, config.cache_version)
        try:
            await asyncio.Event().wait()
        finally:
            await runner.cleanup()
            await terminate_worker()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    overrides: dict[str, Any] = {}
    if args.origin:
        overrides["origin"] = args.origin
    if args.cache_version:
        overrides["cache_version"] = args.cache_version

    try:
        config = SwCacheConfig.from_env(**overrides)
    except SwCacheConfigError as exc:
        _logger.error("Invalid configuration: %s", exc)
        return 2

    try:
        asyncio.run(_serve(config, args.host, args.port))
    except InstallError as exc:
        _logger.error("Install failed, not serving: %s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
