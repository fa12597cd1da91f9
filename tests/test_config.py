from __future__ import annotations

import pytest

from pyswcache.config import SwCacheConfig
from pyswcache.exceptions import SwCacheConfigError


def test_defaults_match_storefront_shell() -> None:
    config = SwCacheConfig()
    assert config.cache_version == "khardingclassics-v3"
    assert config.partition_names == (
        "khardingclassics-v3-static",
        "khardingclassics-v3-dynamic",
        "khardingclassics-v3-images",
    )
    assert "/offline.html" in config.static_assets
    assert config.notification_body == "New update from Khardingclassics!"


def test_origin_normalized_to_scheme_and_host() -> None:
    config = SwCacheConfig(origin="HTTPS://Shop.Example.com/some/path")
    assert config.origin == "https://shop.example.com"
    assert config.absolute_url("/offline.html") == "https://shop.example.com/offline.html"
    assert config.absolute_url("icons/a.svg") == "https://shop.example.com/icons/a.svg"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"origin": "shop.example.com"},
        {"cache_version": "  "},
        {"api_prefix": "api/"},
        {"fetch_timeout": 0},
        {"max_entries_per_partition": 0},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(SwCacheConfigError):
        SwCacheConfig(**kwargs)  # type: ignore[arg-type]


def test_carries_version_requires_separator() -> None:
    config = SwCacheConfig(cache_version="shop-v3")
    assert config.carries_version("shop-v3-static")
    assert config.carries_version("shop-v3")
    assert not config.carries_version("shop-v30-static")
    assert not config.carries_version("shop-v2-dynamic")


def test_from_env_reads_variables_and_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SWCACHE_VERSION", "env-v9")
    monkeypatch.setenv("SWCACHE_ORIGIN", "http://env.test")
    monkeypatch.setenv("SWCACHE_STATIC_ASSETS", "/, /offline.html ,")
    monkeypatch.setenv("SWCACHE_FETCH_TIMEOUT", "2.5")
    monkeypatch.setenv("SWCACHE_MAX_ENTRIES", "50")
    monkeypatch.setenv("SWCACHE_SKIP_WAITING", "off")

    config = SwCacheConfig.from_env(origin="http://override.test")

    assert config.cache_version == "env-v9"
    assert config.origin == "http://override.test"
    assert config.static_assets == ("/", "/offline.html")
    assert config.fetch_timeout == 2.5
    assert config.max_entries_per_partition == 50
    assert config.skip_waiting_on_install is False


def test_from_env_bad_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SWCACHE_FETCH_TIMEOUT", "soon")
    with pytest.raises(SwCacheConfigError, match="SWCACHE_FETCH_TIMEOUT"):
        SwCacheConfig.from_env()
