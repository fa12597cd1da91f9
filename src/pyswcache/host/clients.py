"""Open pages (clients) and which worker controls them."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Client:
    """A window/tab within the worker's scope."""

    id: str
    url: str
    focused: bool = False
    controller: str | None = None


class ClientRegistry:
    """Tracks open clients, claims and ``openWindow``/``focus`` requests."""

    def __init__(self) -> None:
        self._clients: dict[str, Client] = {}
        self._controller_listeners: list[Callable[[Client], None]] = []

    def connect(self, url: str, *, controller: str | None = None) -> Client:
        client = Client(id=secrets.token_hex(8), url=url, controller=controller)
        self._clients[client.id] = client
        return client

    def all(self) -> list[Client]:
        return list(self._clients.values())

    def on_controller_change(self, callback: Callable[[Client], None]) -> None:
        """Register *callback*, called with each client whose controller changed."""
        self._controller_listeners.append(callback)

    async def claim(self, controller: str) -> int:
        """Make *controller* the controller of every open client.

        Returns the number of clients whose controller changed.
        """
        changed = 0
        for client in list(self._clients.values()):
            if client.controller == controller:
                continue
            client.controller = controller
            changed += 1
            for callback in self._controller_listeners:
                try:
                    callback(client)
                except Exception:
                    _logger.exception("controllerchange listener failed for client %s", client.id)
        return changed

    async def open_window(self, url: str) -> Client:
        """Focus a client already showing *url*, or open a new one."""
        target = next((c for c in self._clients.values() if c.url == url), None)
        if target is None:
            target = self.connect(url)
            _logger.debug("Opened window %s", url)
        for client in self._clients.values():
            client.focused = client is target
        return target
