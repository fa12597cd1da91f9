from __future__ import annotations

import pytest

from pyswcache.exceptions import CacheQuotaExceededError
from pyswcache.models.http import Request, Response
from pyswcache.storage import CacheStorage, Partition


def _req(path: str, method: str = "GET") -> Request:
    return Request(url=f"http://shop.test{path}", method=method)


@pytest.mark.asyncio
async def test_last_write_wins_per_identity() -> None:
    partition = Partition("shop-v1-dynamic")
    await partition.put(_req("/api/products"), Response.from_text("old"))
    await partition.put(_req("/api/products"), Response.from_text("new"))

    assert len(partition) == 1
    cached = await partition.match(_req("/api/products"))
    assert cached is not None
    assert cached.text() == "new"


@pytest.mark.asyncio
async def test_identity_includes_method() -> None:
    partition = Partition("p")
    await partition.put(_req("/api/cart", "post"), Response.from_text("queued", status=202))

    assert await partition.match(_req("/api/cart")) is None
    assert await partition.match(_req("/api/cart", "POST")) is not None


@pytest.mark.asyncio
async def test_delete_and_keys() -> None:
    partition = Partition("p")
    await partition.put(_req("/a"), Response())
    await partition.put(_req("/b"), Response())

    assert [r.url for r in await partition.keys()] == ["http://shop.test/a", "http://shop.test/b"]
    assert await partition.delete(_req("/a")) is True
    assert await partition.delete(_req("/a")) is False
    assert [r.url for r in await partition.keys()] == ["http://shop.test/b"]


@pytest.mark.asyncio
async def test_delete_if_unchanged_keeps_newer_entry() -> None:
    partition = Partition("p")
    first = Request(url="http://shop.test/api/cart", method="POST", body=b"1")
    second = Request(url="http://shop.test/api/cart", method="POST", body=b"2")
    await partition.put(first, Response())
    await partition.put(second, Response())

    assert await partition.delete_if_unchanged(first) is False
    assert [r.body for r in await partition.keys()] == [b"2"]
    assert await partition.delete_if_unchanged(second) is True
    assert await partition.keys() == []


@pytest.mark.asyncio
async def test_quota_refuses_new_keys_but_allows_overwrite() -> None:
    partition = Partition("p", max_entries=1)
    await partition.put(_req("/a"), Response.from_text("1"))
    await partition.put(_req("/a"), Response.from_text("2"))

    with pytest.raises(CacheQuotaExceededError) as exc_info:
        await partition.put(_req("/b"), Response())
    assert exc_info.value.partition == "p"


@pytest.mark.asyncio
async def test_storage_open_is_idempotent_and_delete_drops_partition() -> None:
    storage = CacheStorage()
    first = await storage.open("shop-v1-static")
    assert await storage.open("shop-v1-static") is first
    assert await storage.keys() == ["shop-v1-static"]

    assert await storage.delete("shop-v1-static") is True
    assert await storage.has("shop-v1-static") is False
    assert await storage.delete("shop-v1-static") is False


@pytest.mark.asyncio
async def test_storage_match_searches_all_partitions() -> None:
    storage = CacheStorage()
    images = await storage.open("images")
    await images.put(_req("/logo.png"), Response.from_text("png"))

    hit = await storage.match(_req("/logo.png"))
    assert hit is not None
    assert hit.text() == "png"
    assert await storage.match(_req("/missing.png")) is None
