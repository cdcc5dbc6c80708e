"""Core data models used across session, driver, and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

WSS_PORT = 3001


class SessionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    AWAITING_REGISTRATION = "awaiting_registration"
    PAIRED = "paired"


@dataclass(frozen=True)
class Endpoint:
    host: str
    hardware_id: str

    @property
    def url(self) -> str:
        return f"wss://{self.host}:{WSS_PORT}/"


@dataclass(frozen=True)
class TvConfig:
    endpoint: Endpoint
    name: str = "LG TV"
    reconnect_delay_s: float = 5.0
    debug: bool = False
    debug_expiry_s: float = 1800.0
    broadcast: str = "255.255.255.255"


@dataclass(frozen=True)
class InboundFrame:
    type: str
    id: str | None = None
    payload: dict[str, Any] = field(default_factory=dict)
    error: str | None = None


@dataclass(frozen=True)
class SendResult:
    uri: str
    correlation_id: str
    payload: dict[str, Any]
