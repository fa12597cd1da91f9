"""The cache manager: lifecycle, routing, sync, push and messaging.

One :class:`ServiceWorker` exists per process. :func:`start_worker`
creates it, registers it and installs it; :func:`get_worker` hands it to
the rest of the application. There is no teardown short of
:func:`terminate_worker`.

Usage::

    async with aiohttp.ClientSession() as http:
        worker = await start_worker(SwCacheConfig(), fetcher=HttpFetcher(http))
        response = await worker.fetch(Request(url="http://localhost:8080/"))
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from enum import StrEnum
from typing import Any

from pyswcache._constants import CLOSE_ACTION, EXPLORE_ACTION, NOTIFICATION_VIBRATE, ROOT_PATH, SYNC_CART, SYNC_ORDER
from pyswcache._redact import redact_for_log, redact_url
from pyswcache._transport import Fetcher
from pyswcache.config import SwCacheConfig
from pyswcache.exceptions import CacheStorageError, InstallError, NetworkError, WorkerStateError
from pyswcache.host.clients import Client
from pyswcache.host.notifications import ShownNotification
from pyswcache.host.registration import Registration
from pyswcache.models.http import Request, Response
from pyswcache.models.messages import MessageType, WorkerMessage
from pyswcache.models.notification import NotificationAction, NotificationOptions
from pyswcache.routing import Route, Strategy, classify
from pyswcache.storage.cache_storage import CacheStorage
from pyswcache.strategies import PendingWrites, cache_first, network_first, network_first_with_offline
from pyswcache.sync import SyncReport, queue_mutation, replay_pending

_logger = logging.getLogger(__name__)


class WorkerState(StrEnum):
    PARSED = "parsed"
    INSTALLING = "installing"
    WAITING = "waiting"
    ACTIVATING = "activating"
    ACTIVE = "active"
    SUPERSEDED = "superseded"


class ServiceWorker:
    """Cache manager for one version of the storefront shell."""

    def __init__(
        self,
        config: SwCacheConfig,
        fetcher: Fetcher,
        *,
        registration: Registration | None = None,
    ) -> None:
        self.id = secrets.token_hex(8)
        self._config = config
        self._fetcher = fetcher
        self._registration = registration or Registration(
            storage=CacheStorage(max_entries=config.max_entries_per_partition)
        )
        self._writes = PendingWrites()
        self._state = WorkerState.PARSED
        self._skip_waiting = False

    def __repr__(self) -> str:
        return f"ServiceWorker(id={self.id!r}, version={self._config.cache_version!r}, state={self._state.value!r})"

    @property
    def config(self) -> SwCacheConfig:
        return self._config

    @property
    def state(self) -> WorkerState:
        return self._state

    @property
    def registration(self) -> Registration:
        return self._registration

    @property
    def storage(self) -> CacheStorage:
        return self._registration.storage

    @property
    def skip_waiting_requested(self) -> bool:
        return self._skip_waiting

    @property
    def pending_writes(self) -> int:
        return len(self._writes)

    async def drain(self) -> None:
        """Wait for background cache writes still in flight."""
        await self._writes.drain()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def install(self) -> None:
        """Precache the static manifest.

        All-or-nothing: every manifest URL is fetched before anything is
        stored, and any network error or non-2xx response aborts the
        install with :class:`InstallError`. The worker then returns to
        ``parsed`` so the registration may try again.
        """
        if self._state is not WorkerState.PARSED:
            raise WorkerStateError(f"cannot install from state {self._state}")

        _logger.info("Installing worker %s", self.id)
        self._state = WorkerState.INSTALLING
        if self._config.skip_waiting_on_install:
            self._skip_waiting = True

        try:
            await self._precache()
        except InstallError as exc:
            _logger.error("Cache installation failed: %s", exc)
            self._state = WorkerState.PARSED
            raise
        except BaseException:
            self._state = WorkerState.PARSED
            raise
        self._state = WorkerState.WAITING

    async def _precache(self) -> None:
        config = self._config
        requests = [Request(url=config.absolute_url(path)) for path in config.static_assets]
        results = await asyncio.gather(
            *(self._fetcher.fetch(request) for request in requests),
            return_exceptions=True,
        )

        fetched: list[tuple[Request, Response]] = []
        for request, result in zip(requests, results, strict=True):
            if isinstance(result, NetworkError):
                raise InstallError(f"failed to fetch {request.url}: {result}", url=request.url) from result
            if isinstance(result, BaseException):
                raise result
            if not result.ok:
                raise InstallError(f"HTTP {result.status} for {request.url}", url=request.url)
            fetched.append((request, result))

        _logger.info("Caching %d static assets", len(fetched))
        for name in config.partition_names:
            await self.storage.open(name)
        static = await self.storage.open(config.static_cache)
        try:
            for request, response in fetched:
                await static.put(request, response)
        except CacheStorageError as exc:
            await self.storage.delete(config.static_cache)
            raise InstallError(f"failed to store static assets: {exc}") from exc

    async def activate(self) -> None:
        """Evict partitions from other versions and claim open clients.

        Normally reached through :meth:`Registration.activate`, which keeps
        the registration slots in step.
        """
        if self._state not in (WorkerState.WAITING, WorkerState.ACTIVATING):
            raise WorkerStateError(f"cannot activate from state {self._state}")

        _logger.info("Activating worker %s", self.id)
        self._state = WorkerState.ACTIVATING

        for name in await self.storage.keys():
            if not self._config.carries_version(name):
                _logger.info("Deleting old cache: %s", name)
                await self.storage.delete(name)

        claimed = await self._registration.clients.claim(self.id)
        _logger.debug("Claimed %d client(s)", claimed)
        self._state = WorkerState.ACTIVE

    async def skip_waiting(self) -> None:
        """Activate without waiting for open clients to close."""
        self._skip_waiting = True
        if self._state is WorkerState.WAITING:
            await self._registration.activate(self)

    def _supersede(self) -> None:
        self._state = WorkerState.SUPERSEDED

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def handle_fetch(self, request: Request) -> Response | None:
        """Route *request* through its strategy.

        Returns ``None`` for requests the worker does not intercept:
        cross-origin requests, and every request while the worker is not
        active (a superseded worker must not reopen evicted partitions).
        Raises :class:`NetworkError` when the strategy has no fallback left.
        """
        if self._state is not WorkerState.ACTIVE:
            _logger.debug("Worker %s is %s, not intercepting %s", self.id, self._state, redact_url(request.url))
            return None

        route = classify(request, self._config)
        if route.strategy is Strategy.BYPASS:
            _logger.debug("Bypassing %s", redact_url(request.url))
            return None

        _logger.debug("%s %s -> %s (%s)", request.method, redact_url(request.url), route.strategy, route.rule)
        return await self._run_strategy(route, request)

    async def fetch(self, request: Request) -> Response:
        """Like :meth:`handle_fetch`, but bypassed requests go to the network."""
        response = await self.handle_fetch(request)
        if response is None:
            return await self._fetcher.fetch(request)
        return response

    async def _run_strategy(self, route: Route, request: Request) -> Response:
        assert route.partition is not None  # noqa: S101
        partition = await self.storage.open(route.partition)

        if route.strategy is Strategy.CACHE_FIRST:
            return await cache_first(request, partition, fetcher=self._fetcher, writes=self._writes)

        if route.strategy is Strategy.NETWORK_FIRST_OFFLINE:
            return await network_first_with_offline(
                request,
                partition,
                fetcher=self._fetcher,
                writes=self._writes,
                offline_partition=await self.storage.open(self._config.static_cache),
                offline_request=Request(url=self._config.absolute_url(self._config.offline_page)),
            )

        return await network_first(request, partition, fetcher=self._fetcher, writes=self._writes)

    # ------------------------------------------------------------------
    # Background sync
    # ------------------------------------------------------------------

    async def handle_sync(self, tag: str) -> SyncReport | None:
        """Dispatch a connectivity-restored signal. Unknown tags are ignored."""
        _logger.info("Background sync triggered: %s", tag)
        if tag == SYNC_CART:
            return await self.sync_cart()
        if tag == SYNC_ORDER:
            return await self.sync_orders()
        _logger.debug("Ignoring unknown sync tag %s", tag)
        return None

    async def sync_cart(self) -> SyncReport:
        return await self._replay(SYNC_CART, self._config.cart_sync_patterns)

    async def sync_orders(self) -> SyncReport:
        return await self._replay(SYNC_ORDER, self._config.order_sync_patterns)

    async def _replay(self, tag: str, patterns: tuple[str, ...]) -> SyncReport:
        partition = await self.storage.open(self._config.dynamic_cache)
        try:
            return await replay_pending(tag, partition, patterns, fetcher=self._fetcher)
        except CacheStorageError:
            _logger.exception("Sync %s failed", tag)
            raise

    async def queue_mutation(self, request: Request) -> Response:
        """Persist a failed mutating request for the next sync signal."""
        partition = await self.storage.open(self._config.dynamic_cache)
        return await queue_mutation(partition, request)

    # ------------------------------------------------------------------
    # Push notifications
    # ------------------------------------------------------------------

    def _push_options(self, body: str) -> NotificationOptions:
        config = self._config
        return NotificationOptions(
            body=body,
            icon=config.notification_icon,
            badge=config.notification_badge,
            vibrate=NOTIFICATION_VIBRATE,
            actions=(
                NotificationAction(action=EXPLORE_ACTION, title="View Collection", icon=config.notification_badge),
                NotificationAction(action=CLOSE_ACTION, title="Close"),
            ),
        )

    async def handle_push(self, payload: str | bytes | None = None) -> ShownNotification:
        _logger.info("Push notification received")
        if payload is None:
            body = self._config.notification_body
        elif isinstance(payload, bytes):
            body = payload.decode("utf-8", errors="replace")
        else:
            body = payload
        return await self._registration.notifications.show(self._config.app_name, self._push_options(body))

    async def handle_notification_click(
        self,
        notification: ShownNotification,
        action: str | None = None,
    ) -> Client | None:
        """Close *notification* and open the window its action points at.

        ``explore`` opens the collection page and a click on the body opens
        the root page. Other actions only close the notification.
        """
        _logger.debug("Notification clicked: %s", action)
        notification.close()

        if action == EXPLORE_ACTION:
            path = self._config.explore_path
        elif not action:
            path = ROOT_PATH
        else:
            return None
        return await self._registration.clients.open_window(self._config.absolute_url(path))

    # ------------------------------------------------------------------
    # Messaging
    # ------------------------------------------------------------------

    async def handle_message(self, data: Any) -> None:
        _logger.debug("Message received: %s", redact_for_log(data))
        message = WorkerMessage.parse(data)
        if message is None:
            return
        if message.type is MessageType.SKIP_WAITING:
            await self.skip_waiting()
        elif message.type is MessageType.CLEAR_CACHE:
            await self.clear_caches()

    async def clear_caches(self) -> list[str]:
        """Delete every partition, whatever its version tag."""
        names = await self.storage.keys()
        for name in names:
            await self.storage.delete(name)
        _logger.info("Cleared %d cache partition(s)", len(names))
        return names


# ----------------------------------------------------------------------
# Process-wide instance
# ----------------------------------------------------------------------

_worker: ServiceWorker | None = None


async def start_worker(
    config: SwCacheConfig | None = None,
    *,
    fetcher: Fetcher,
    registration: Registration | None = None,
) -> ServiceWorker:
    """Create, register and install the process-wide worker.

    Raises :class:`WorkerStateError` when a worker is already running and
    :class:`InstallError` when precaching fails (no worker is kept then).
    """
    global _worker
    if _worker is not None:
        raise WorkerStateError("worker already started")

    worker = ServiceWorker(config or SwCacheConfig.from_env(), fetcher, registration=registration)
    await worker.registration.register(worker)
    _worker = worker
    return worker


def get_worker() -> ServiceWorker:
    if _worker is None:
        raise WorkerStateError("worker not started. Call start_worker() first")
    return _worker


async def terminate_worker() -> None:
    """Drop the process-wide worker after its pending writes settle."""
    global _worker
    worker, _worker = _worker, None
    if worker is not None:
        await worker.drain()
