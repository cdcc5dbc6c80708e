"""Secure WebSocket transport built on websocket-client."""

from __future__ import annotations

import logging
import ssl
import threading

import websocket

from hubctl.core.errors import TransportConnectError, TransportSendError
from hubctl.transports.base import TransportEvent, TransportEventKind, TransportHandler

LOGGER = logging.getLogger(__name__)

# TVs present self-signed certificates on the LAN.
_SSL_OPTIONS = {"cert_reqs": ssl.CERT_NONE, "check_hostname": False}


class WebSocketTransport:
    def __init__(self, *, ping_interval_s: float = 0) -> None:
        self.ping_interval_s = ping_interval_s
        self._app: websocket.WebSocketApp | None = None
        self._thread: threading.Thread | None = None

    @property
    def is_open(self) -> bool:
        app = self._app
        return app is not None and app.sock is not None and bool(app.sock.connected)

    def open(self, url: str, handler: TransportHandler) -> None:
        self.close()

        def _on_open(_: websocket.WebSocketApp) -> None:
            handler(TransportEvent(TransportEventKind.OPENED))

        def _on_message(_: websocket.WebSocketApp, message: str | bytes) -> None:
            if isinstance(message, bytes):
                message = message.decode("utf-8", errors="replace")
            handler(TransportEvent(TransportEventKind.MESSAGE, message))

        def _on_error(_: websocket.WebSocketApp, exc: Exception) -> None:
            handler(TransportEvent(TransportEventKind.FAILED, str(exc) or exc.__class__.__name__))

        def _on_close(_: websocket.WebSocketApp, code: int | None, reason: str | None) -> None:
            handler(TransportEvent(TransportEventKind.CLOSED, reason or (str(code) if code else None)))

        try:
            app = websocket.WebSocketApp(
                url,
                on_open=_on_open,
                on_message=_on_message,
                on_error=_on_error,
                on_close=_on_close,
            )
        except (websocket.WebSocketException, ValueError) as exc:
            raise TransportConnectError(f"Cannot connect to {url}: {exc}") from exc

        thread = threading.Thread(
            target=app.run_forever,
            kwargs={"sslopt": _SSL_OPTIONS, "ping_interval": self.ping_interval_s},
            name=f"hubctl-ws-{url}",
            daemon=True,
        )
        self._app = app
        self._thread = thread
        LOGGER.debug("Opening %s", url)
        try:
            thread.start()
        except RuntimeError as exc:
            self._app = None
            self._thread = None
            raise TransportConnectError(f"Cannot start connection thread for {url}: {exc}") from exc

    def send(self, frame: str) -> None:
        app = self._app
        if app is None or not self.is_open:
            raise TransportSendError("WebSocket is not connected")
        try:
            app.send(frame)
        except (websocket.WebSocketException, OSError) as exc:
            raise TransportSendError(f"WebSocket send failed: {exc}") from exc

    def close(self) -> None:
        app, self._app = self._app, None
        self._thread = None
        if app is None:
            return
        LOGGER.debug("Closing WebSocket")
        app.close()
