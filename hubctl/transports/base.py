"""Transport interfaces."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


class TransportEventKind(str, Enum):
    OPENED = "opened"
    MESSAGE = "message"
    CLOSED = "closed"
    FAILED = "failed"


@dataclass(frozen=True)
class TransportEvent:
    kind: TransportEventKind
    data: str | None = None


TransportHandler = Callable[[TransportEvent], None]


class Transport(Protocol):
    def open(self, url: str, handler: TransportHandler) -> None:
        """Start connecting to `url`; lifecycle and frames arrive on `handler`."""

    def send(self, frame: str) -> None:
        """Send a text frame on the open connection."""

    def close(self) -> None:
        """Close the connection. Closing an idle transport is a no-op."""
