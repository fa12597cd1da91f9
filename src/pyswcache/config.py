"""Worker configuration for pyswcache."""

from __future__ import annotations

import dataclasses
import os
from typing import Any
from urllib.parse import urlsplit

from pyswcache._constants import (
    API_PREFIX,
    APP_NAME,
    CACHE_VERSION,
    CART_SYNC_PATTERNS,
    DEFAULT_ORIGIN,
    DYNAMIC_SUFFIX,
    EXPLORE_PATH,
    IMAGE_SUFFIX,
    NOTIFICATION_BADGE,
    NOTIFICATION_ICON,
    OFFLINE_PAGE,
    ORDER_SYNC_PATTERNS,
    STATIC_ASSETS,
    STATIC_SUFFIX,
)
from pyswcache.exceptions import SwCacheConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_tuple(value: str | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(part.strip() for part in value.split(",") if part.strip())


def _normalize_origin(value: str) -> str:
    parts = urlsplit(value.strip())
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        raise SwCacheConfigError(f"origin must be an absolute http(s) URL, got {value!r}")
    return f"{parts.scheme}://{parts.netloc}".lower()


@dataclasses.dataclass(frozen=True)
class SwCacheConfig:
    """Worker configuration.

    Parameters
    ----------
    cache_version : str
        Version tag embedded in every partition name. Changing it is the
        only supported way to force full invalidation on next activation.
    origin : str
        Scheme and host the worker serves. Requests to any other origin
        bypass the worker.
    api_prefix : str
        Path prefix routed through network-first against the dynamic
        partition.
    static_assets : tuple of str
        Shell manifest precached into the static partition at install.
    offline_page : str
        Path of the document served when a navigation misses both network
        and cache. Must be part of ``static_assets`` to be useful.
    cart_sync_patterns : tuple of str
        URL fragments identifying pending cart mutations.
    order_sync_patterns : tuple of str
        URL fragments identifying pending order mutations.
    fetch_timeout : float
        Total timeout in seconds for one network fetch.
    max_entries_per_partition : int or None
        Optional entry bound per partition. ``None`` means unbounded.
    skip_waiting_on_install : bool
        Ask to skip the waiting state as soon as install starts, so a new
        version activates without waiting for open clients to close.
    app_name : str
        Notification title.
    notification_body : str
        Body used when a push carries no payload.
    notification_icon, notification_badge : str
        Icon paths shown with notifications.
    explore_path : str
        Path opened by the ``explore`` notification action.
    """

    cache_version: str = CACHE_VERSION
    origin: str = DEFAULT_ORIGIN
    api_prefix: str = API_PREFIX
    static_assets: tuple[str, ...] = STATIC_ASSETS
    offline_page: str = OFFLINE_PAGE
    cart_sync_patterns: tuple[str, ...] = CART_SYNC_PATTERNS
    order_sync_patterns: tuple[str, ...] = ORDER_SYNC_PATTERNS
    fetch_timeout: float = 30.0
    max_entries_per_partition: int | None = None
    skip_waiting_on_install: bool = True
    app_name: str = APP_NAME
    notification_body: str = f"New update from {APP_NAME}!"
    notification_icon: str = NOTIFICATION_ICON
    notification_badge: str = NOTIFICATION_BADGE
    explore_path: str = EXPLORE_PATH

    def __post_init__(self) -> None:
        version = self.cache_version.strip()
        if not version:
            raise SwCacheConfigError("cache_version must be non-empty")
        object.__setattr__(self, "cache_version", version)
        object.__setattr__(self, "origin", _normalize_origin(self.origin))
        if not self.api_prefix.startswith("/"):
            raise SwCacheConfigError(f"api_prefix must start with '/', got {self.api_prefix!r}")
        if self.fetch_timeout <= 0:
            raise SwCacheConfigError("fetch_timeout must be positive")
        if self.max_entries_per_partition is not None and self.max_entries_per_partition < 1:
            raise SwCacheConfigError("max_entries_per_partition must be at least 1")

    @property
    def static_cache(self) -> str:
        return f"{self.cache_version}-{STATIC_SUFFIX}"

    @property
    def dynamic_cache(self) -> str:
        return f"{self.cache_version}-{DYNAMIC_SUFFIX}"

    @property
    def image_cache(self) -> str:
        return f"{self.cache_version}-{IMAGE_SUFFIX}"

    @property
    def partition_names(self) -> tuple[str, str, str]:
        return (self.static_cache, self.dynamic_cache, self.image_cache)

    def carries_version(self, partition_name: str) -> bool:
        """Whether *partition_name* belongs to the current version tag."""
        return partition_name == self.cache_version or partition_name.startswith(f"{self.cache_version}-")

    def absolute_url(self, path: str) -> str:
        """Resolve an origin-relative path against :attr:`origin`."""
        if "://" in path:
            return path
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.origin}{path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> SwCacheConfig:
        """Create configuration from environment variables.

        Reads optional ``SWCACHE_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SwCacheConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SWCACHE_VERSION": "cache_version",
            "SWCACHE_ORIGIN": "origin",
            "SWCACHE_API_PREFIX": "api_prefix",
            "SWCACHE_OFFLINE_PAGE": "offline_page",
            "SWCACHE_APP_NAME": "app_name",
            "SWCACHE_NOTIFICATION_BODY": "notification_body",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        assets = _env_tuple(env.get("SWCACHE_STATIC_ASSETS"))
        if assets is not None:
            config_kwargs["static_assets"] = assets

        # Numeric fields, handled separately
        timeout_env = env.get("SWCACHE_FETCH_TIMEOUT")
        if timeout_env is not None and "fetch_timeout" not in overrides:
            try:
                config_kwargs["fetch_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise SwCacheConfigError(f"SWCACHE_FETCH_TIMEOUT is not a number: {timeout_env!r}") from exc

        max_entries_env = env.get("SWCACHE_MAX_ENTRIES")
        if max_entries_env is not None and "max_entries_per_partition" not in overrides:
            try:
                config_kwargs["max_entries_per_partition"] = int(max_entries_env) or None
            except ValueError as exc:
                raise SwCacheConfigError(f"SWCACHE_MAX_ENTRIES is not an integer: {max_entries_env!r}") from exc

        if "skip_waiting_on_install" not in overrides:
            config_kwargs["skip_waiting_on_install"] = _env_bool(env.get("SWCACHE_SKIP_WAITING"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
