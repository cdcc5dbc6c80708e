"""Pairing handshake state machine.

`transition` is a pure function of (state, event) returning the next state and
the side effects the driver must carry out. `Session` wraps it with the
per-connection data: generation, client key, and correlation counter.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from hubctl.core.model import InboundFrame, SessionState
from hubctl.core.protocol import TYPE_ERROR, TYPE_REGISTERED, TYPE_RESPONSE, client_key_of


class EventKind(str, Enum):
    OPEN = "open"
    CLOSE = "close"
    TRANSPORT_OPENED = "transport_opened"
    TRANSPORT_CLOSED = "transport_closed"
    TRANSPORT_FAILED = "transport_failed"
    FRAME = "frame"


class ActionKind(str, Enum):
    SEND_REGISTER = "send_register"
    STORE_CREDENTIAL = "store_credential"
    REPORT_FAULT = "report_fault"
    CLOSE_TRANSPORT = "close_transport"
    REQUEST_RECONNECT = "request_reconnect"
    LOG_RESPONSE = "log_response"


@dataclass(frozen=True)
class SessionEvent:
    kind: EventKind
    frame: InboundFrame | None = None
    reason: str | None = None


@dataclass(frozen=True)
class SessionAction:
    kind: ActionKind
    value: str | None = None


_LOST = (EventKind.TRANSPORT_CLOSED, EventKind.TRANSPORT_FAILED)


def transition(
    state: SessionState,
    event: SessionEvent,
) -> tuple[SessionState, tuple[SessionAction, ...]]:
    if event.kind == EventKind.OPEN:
        return SessionState.CONNECTING, ()

    if event.kind == EventKind.CLOSE:
        return SessionState.DISCONNECTED, (SessionAction(ActionKind.CLOSE_TRANSPORT),)

    if event.kind in _LOST:
        if state == SessionState.DISCONNECTED:
            return state, ()
        return SessionState.DISCONNECTED, (
            SessionAction(ActionKind.REQUEST_RECONNECT, event.reason),
        )

    if event.kind == EventKind.TRANSPORT_OPENED:
        if state != SessionState.CONNECTING:
            return state, ()
        return SessionState.AWAITING_REGISTRATION, (SessionAction(ActionKind.SEND_REGISTER),)

    frame = event.frame
    if frame is None or state not in (SessionState.AWAITING_REGISTRATION, SessionState.PAIRED):
        return state, ()

    if frame.type == TYPE_REGISTERED:
        return SessionState.PAIRED, (
            SessionAction(ActionKind.STORE_CREDENTIAL, client_key_of(frame)),
        )

    if frame.type == TYPE_ERROR:
        fault = SessionAction(ActionKind.REPORT_FAULT, frame.error or "unknown error")
        if state == SessionState.AWAITING_REGISTRATION:
            return SessionState.DISCONNECTED, (fault, SessionAction(ActionKind.CLOSE_TRANSPORT))
        return state, (fault,)

    if frame.type == TYPE_RESPONSE:
        return state, (SessionAction(ActionKind.LOG_RESPONSE, frame.id),)

    return state, ()


class Session:
    """A single logical connection to the TV."""

    def __init__(self, generation: int, credential: str = "") -> None:
        self.generation = generation
        self.credential = credential
        self.state = SessionState.DISCONNECTED
        self._counter = 0

    @property
    def is_paired(self) -> bool:
        return self.state == SessionState.PAIRED

    def apply(self, event: SessionEvent) -> tuple[SessionAction, ...]:
        self.state, actions = transition(self.state, event)
        return actions

    def next_correlation_id(self) -> str:
        self._counter += 1
        return f"req_{self._counter}"
