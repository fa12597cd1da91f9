"""Data models shared by the worker, its host and the proxy."""

from pyswcache.models.http import Destination, Request, Response
from pyswcache.models.messages import MessageType, WorkerMessage
from pyswcache.models.notification import NotificationAction, NotificationData, NotificationOptions

__all__ = [
    "Destination",
    "MessageType",
    "NotificationAction",
    "NotificationData",
    "NotificationOptions",
    "Request",
    "Response",
    "WorkerMessage",
]
