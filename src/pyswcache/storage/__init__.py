"""Cache storage layer.

Partitions are the only shared mutable state in the worker. Every handler
reaches them through :class:`CacheStorage`; there is no locking, and the
last write to complete wins.
"""

from pyswcache.storage.cache_storage import CacheStorage
from pyswcache.storage.partition import Partition

__all__ = ["CacheStorage", "Partition"]
