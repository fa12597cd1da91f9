"""Worker registration: the installing, waiting and active slots.

The registration plays the platform's part of the lifecycle. It runs a
worker's install step, decides when the worker becomes active, and marks
the worker it replaces as superseded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pyswcache.exceptions import WorkerStateError
from pyswcache.host.clients import ClientRegistry
from pyswcache.host.notifications import NotificationCenter
from pyswcache.storage.cache_storage import CacheStorage

if TYPE_CHECKING:
    from pyswcache.worker import ServiceWorker

_logger = logging.getLogger(__name__)


class Registration:
    """Holds the workers registered for one scope."""

    def __init__(
        self,
        *,
        scope: str = "/",
        storage: CacheStorage | None = None,
        clients: ClientRegistry | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.scope = scope
        self.storage = storage or CacheStorage()
        self.clients = clients or ClientRegistry()
        self.notifications = notifications or NotificationCenter()
        self.installing: ServiceWorker | None = None
        self.waiting: ServiceWorker | None = None
        self.active: ServiceWorker | None = None

    async def register(self, worker: ServiceWorker) -> ServiceWorker:
        """Install *worker* and activate it when nothing holds it back.

        The worker goes straight to active when it asked to skip waiting or
        when no worker is active yet. Otherwise it stays in the waiting slot
        until :meth:`activate` is called (for instance by a ``SKIP_WAITING``
        message). An :class:`~pyswcache.exceptions.InstallError` propagates
        and leaves the slots as they were.
        """
        if worker.registration is not self:
            raise WorkerStateError("worker belongs to a different registration")

        self.installing = worker
        try:
            await worker.install()
        finally:
            self.installing = None

        previous_waiting = self.waiting
        if previous_waiting is not None and previous_waiting is not worker:
            previous_waiting._supersede()
        self.waiting = worker
        _logger.info("Worker %s installed (version %s)", worker.id, worker.config.cache_version)

        if worker.skip_waiting_requested or self.active is None:
            await self.activate(worker)
        return worker

    async def activate(self, worker: ServiceWorker) -> None:
        """Promote the waiting *worker* to active."""
        if worker is self.active:
            return
        if worker is not self.waiting:
            raise WorkerStateError(f"worker {worker.id} is not waiting (state={worker.state})")

        previous = self.active
        self.waiting = None
        self.active = worker
        if previous is not None:
            previous._supersede()
            _logger.info("Worker %s superseded by %s", previous.id, worker.id)
        await worker.activate()
