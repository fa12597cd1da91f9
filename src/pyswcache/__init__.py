"""pyswcache - Async offline cache layer for a storefront PWA shell."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyswcache")
except PackageNotFoundError:
    __version__ = "0+local"
from pyswcache._transport import Fetcher, HttpFetcher
from pyswcache.config import SwCacheConfig
from pyswcache.exceptions import (
    CacheQuotaExceededError,
    CacheStorageError,
    InstallError,
    NetworkError,
    SwCacheConfigError,
    SwCacheError,
    WorkerStateError,
)
from pyswcache.host import Client, ClientRegistry, NotificationCenter, Registration, ShownNotification
from pyswcache.models import (
    Destination,
    MessageType,
    NotificationAction,
    NotificationOptions,
    Request,
    Response,
    WorkerMessage,
)
from pyswcache.storage import CacheStorage, Partition
from pyswcache.sync import SyncReport
from pyswcache.worker import ServiceWorker, WorkerState, get_worker, start_worker, terminate_worker

__all__ = [
    "__version__",
    "CacheQuotaExceededError",
    "CacheStorage",
    "CacheStorageError",
    "Client",
    "ClientRegistry",
    "Destination",
    "Fetcher",
    "HttpFetcher",
    "InstallError",
    "MessageType",
    "NetworkError",
    "NotificationAction",
    "NotificationCenter",
    "NotificationOptions",
    "Partition",
    "Registration",
    "Request",
    "Response",
    "ServiceWorker",
    "ShownNotification",
    "SwCacheConfig",
    "SwCacheConfigError",
    "SwCacheError",
    "SyncReport",
    "WorkerMessage",
    "WorkerState",
    "get_worker",
    "start_worker",
    "terminate_worker",
]
