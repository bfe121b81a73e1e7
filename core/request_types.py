"""Shared request data types."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InboundRequest:
    """Request as received from the caller."""

    method: str
    path: str
    query: dict[str, str] = field(default_factory=dict)
    # Lower-cased names; only authorization and content-type are read
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True)
class OutboundRequest:
    """Prepared data for a backend request."""

    method: str
    url: str
    headers: dict[str, str]
    content: str | bytes | None = None


@dataclass(frozen=True)
class BackendResponse:
    """Backend answer with its body already parsed."""

    status_code: int
    content_type: str
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def is_json(self) -> bool:
        return "json" in self.content_type.lower()


@dataclass(frozen=True)
class Outcome:
    """Final response handed back to the host runtime."""

    status_code: int
    headers: dict[str, str]
    body: Any = None
    media_type: str | None = "application/json"

    @property
    def is_empty(self) -> bool:
        return self.media_type is None
