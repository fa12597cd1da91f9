"""Host-provided services: storage, clients, notifications, registration."""

from pyswcache.host.clients import Client, ClientRegistry
from pyswcache.host.notifications import NotificationCenter, ShownNotification
from pyswcache.host.registration import Registration

__all__ = [
    "Client",
    "ClientRegistry",
    "NotificationCenter",
    "Registration",
    "ShownNotification",
]
