"""Platform notification centre."""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass, field

from pyswcache.models.notification import NotificationOptions

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ShownNotification:
    title: str
    options: NotificationOptions
    id: str = field(default_factory=lambda: secrets.token_hex(8))
    closed: bool = False

    def close(self) -> None:
        self.closed = True


class NotificationCenter:
    """Keeps every notification the worker has shown."""

    def __init__(self) -> None:
        self._shown: list[ShownNotification] = []

    async def show(self, title: str, options: NotificationOptions) -> ShownNotification:
        notification = ShownNotification(title=title, options=options)
        self._shown.append(notification)
        _logger.debug("Showing notification %s: %s", notification.id, title)
        return notification

    def visible(self) -> list[ShownNotification]:
        return [n for n in self._shown if not n.closed]
