"""Cross-context message contract."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class MessageType(StrEnum):
    SKIP_WAITING = "SKIP_WAITING"
    CLEAR_CACHE = "CLEAR_CACHE"


class WorkerMessage(BaseModel):
    """A recognised message posted to the worker."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: MessageType

    @classmethod
    def parse(cls, data: Any) -> WorkerMessage | None:
        """Return the message for *data*, or ``None`` for anything unrecognised."""
        if not isinstance(data, dict):
            return None
        kind = data.get("type")
        if kind not in MessageType.__members__.values():
            return None
        return cls(type=MessageType(kind))
