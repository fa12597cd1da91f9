"""Notification payloads shown on push."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class NotificationAction(BaseModel):
    """A button rendered on a notification."""

    model_config = ConfigDict(frozen=True)

    action: str
    title: str
    icon: str | None = None


class NotificationData(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_of_arrival: datetime = Field(default_factory=lambda: datetime.now(UTC))
    primary_key: int = 1


class NotificationOptions(BaseModel):
    """Options passed to the platform when showing a notification."""

    model_config = ConfigDict(frozen=True)

    body: str
    icon: str | None = None
    badge: str | None = None
    vibrate: tuple[int, ...] = ()
    data: NotificationData = Field(default_factory=NotificationData)
    actions: tuple[NotificationAction, ...] = ()
