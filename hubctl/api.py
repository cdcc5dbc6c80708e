"""Stable public API for building tooling on top of hubctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from hubctl.core.credentials import CredentialStore, FileCredentialStore, MemoryCredentialStore
from hubctl.core.dispatcher import INTENTS, Intent, run_intent
from hubctl.core.driver import TvDriver
from hubctl.core.errors import (
    CommandError,
    ConfigError,
    ConfigValidationError,
    CredentialStoreError,
    HubctlError,
    InvalidHardwareIdError,
    MalformedFrameError,
    NotReadyError,
    ProtocolError,
    TransportConnectError,
    TransportError,
    TransportSendError,
    TransportTimeoutError,
)
from hubctl.core.model import Endpoint, SendResult, SessionState, TvConfig
from hubctl.core.supervisor import Scheduler, TimerScheduler
from hubctl.sensors.soil_moisture import SensorEvent, decode_attribute, parse_description
from hubctl.transports.base import Transport, TransportEvent, TransportHandler
from hubctl.transports.wss import WebSocketTransport
from hubctl.transports.wol import WakeOnLanSender, normalize_hardware_id

__all__ = [
    "HubctlError",
    "CommandError",
    "ConfigError",
    "ConfigValidationError",
    "CredentialStoreError",
    "InvalidHardwareIdError",
    "MalformedFrameError",
    "NotReadyError",
    "ProtocolError",
    "TransportError",
    "TransportConnectError",
    "TransportSendError",
    "TransportTimeoutError",
    "Endpoint",
    "SendResult",
    "SessionState",
    "TvConfig",
    "CredentialStore",
    "FileCredentialStore",
    "MemoryCredentialStore",
    "Intent",
    "INTENTS",
    "SensorEvent",
    "decode_attribute",
    "parse_description",
    "normalize_hardware_id",
    "Client",
]


class _LockedScheduler:
    def __init__(self, scheduler: Scheduler, lock: threading.RLock) -> None:
        self._scheduler = scheduler
        self._lock = lock

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> None:
        def _locked() -> None:
            with self._lock:
                callback()

        self._scheduler.call_later(delay_s, _locked)


class _LockedTransport:
    def __init__(self, transport: Transport, lock: threading.RLock) -> None:
        self._transport = transport
        self._lock = lock

    def open(self, url: str, handler: TransportHandler) -> None:
        def _locked(event: TransportEvent) -> None:
            with self._lock:
                handler(event)

        self._transport.open(url, _locked)

    def send(self, frame: str) -> None:
        self._transport.send(frame)

    def close(self) -> None:
        self._transport.close()


class Client:
    """Public client for controlling one TV.

    A `Client` wraps a `TvDriver` and plays the host role: it provides a timer
    scheduler, a file-backed credential store, and a blocking wait for the
    pairing handshake so scripts can connect and send commands in sequence.

    Timer callbacks and transport events arrive on their own threads. They and
    the caller's `connect`, `send`, `dispatch` and `close` all run under one
    reentrant lock, so the driver only ever sees one of them at a time.
    """

    def __init__(
        self,
        config: TvConfig,
        *,
        transport: Transport | None = None,
        scheduler: Scheduler | None = None,
        credentials: CredentialStore | None = None,
        waker: WakeOnLanSender | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._scheduler = scheduler or TimerScheduler()
        self._driver = TvDriver(
            config,
            transport=_LockedTransport(transport or WebSocketTransport(), self._lock),
            scheduler=_LockedScheduler(self._scheduler, self._lock),
            credentials=credentials or FileCredentialStore(config.endpoint.host),
            waker=waker,
        )

    @property
    def config(self) -> TvConfig:
        return self._driver.config

    @property
    def state(self) -> SessionState:
        return self._driver.state

    @property
    def credential(self) -> str:
        return self._driver.credential

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(self._driver.attributes)

    def connect(self, *, timeout_s: float = 30.0) -> None:
        """Open a session and block until the TV accepts the registration.

        Accepting a new client requires confirming the prompt on the TV, so
        the first pairing usually needs a generous timeout.
        """
        paired = threading.Event()

        def _listener(state: SessionState) -> None:
            if state == SessionState.PAIRED:
                paired.set()

        self._driver.state_listeners.append(_listener)
        try:
            with self._lock:
                self._driver.open()
            if not paired.wait(timeout_s):
                raise TransportTimeoutError(
                    f"Timed out after {timeout_s:.0f}s waiting to pair with "
                    f"{self.config.endpoint.host} (state: {self.state.value})"
                )
        finally:
            self._driver.state_listeners.remove(_listener)

    def send(self, command: str, value: str | None = None) -> SendResult:
        with self._lock:
            return run_intent(self._driver, command, value)

    def dispatch(self, path: str, params: dict[str, Any] | None = None) -> SendResult:
        with self._lock:
            return self._driver.dispatcher.dispatch(path, params)

    def wake(self) -> str:
        return self._driver.waker.wake(self.config.endpoint.hardware_id)

    def close(self) -> None:
        with self._lock:
            self._driver.close()
            if isinstance(self._scheduler, TimerScheduler):
                self._scheduler.cancel_all()
