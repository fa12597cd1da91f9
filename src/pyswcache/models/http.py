"""Request and response snapshots.

Both models are frozen: a stored response can be handed to any number of
callers without one of them mutating what the partition holds.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Destination(StrEnum):
    """Declared resource kind of a request (``Request.destination``)."""

    EMPTY = ""
    DOCUMENT = "document"
    IMAGE = "image"
    STYLE = "style"
    SCRIPT = "script"
    FONT = "font"
    MANIFEST = "manifest"

    @classmethod
    def _missing_(cls, value: object) -> Destination:
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return cls.EMPTY


class Request(BaseModel):
    """An outgoing request as seen by the worker."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    destination: Destination = Destination.EMPTY

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        method = value.strip().upper()
        if not method:
            raise ValueError("method must be non-empty")
        return method

    @field_validator("destination", mode="before")
    @classmethod
    def _coerce_destination(cls, value: Any) -> Destination:
        if isinstance(value, Destination):
            return value
        return Destination(value if isinstance(value, str) else "")

    @field_validator("url")
    @classmethod
    def _require_absolute(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"url must be absolute, got {value!r}")
        return value

    @property
    def cache_key(self) -> tuple[str, str]:
        """Identity used by partitions: method plus URL."""
        return (self.method, self.url)

    @property
    def origin(self) -> str:
        parts = urlsplit(self.url)
        return f"{parts.scheme}://{parts.netloc}".lower()

    @property
    def path(self) -> str:
        return urlsplit(self.url).path or "/"


class Response(BaseModel):
    """A response snapshot: status, headers, body."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    status: int = 200
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")

    def clone(self) -> Response:
        """Independent copy, as stored alongside the one returned."""
        return self.model_copy(deep=True)

    @classmethod
    def from_text(cls, text: str, *, status: int = 200, content_type: str = "text/plain", **kwargs: Any) -> Response:
        headers = {"Content-Type": f"{content_type}; charset=utf-8"}
        headers.update(kwargs.pop("headers", {}))
        return cls(status=status, headers=headers, body=text.encode("utf-8"), **kwargs)
