"""LG webOS TV driver: host lifecycle callbacks wired to session and dispatcher."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from hubctl.core.credentials import CredentialStore, FileCredentialStore
from hubctl.core.dispatcher import AttributeSink, CommandDispatcher
from hubctl.core.errors import HubctlError, MalformedFrameError, TransportError
from hubctl.core.model import SendResult, SessionState, TvConfig
from hubctl.core.protocol import build_register_frame, parse_frame
from hubctl.core.session import ActionKind, EventKind, Session, SessionAction, SessionEvent
from hubctl.core.supervisor import ReconnectSupervisor, Scheduler, TimerScheduler
from hubctl.transports.base import Transport, TransportEvent, TransportEventKind
from hubctl.transports.wss import WebSocketTransport
from hubctl.transports.wol import WakeOnLanSender

LOGGER = logging.getLogger(__name__)
PACKAGE_LOGGER = logging.getLogger("hubctl")

_TRANSPORT_EVENTS = {
    TransportEventKind.OPENED: EventKind.TRANSPORT_OPENED,
    TransportEventKind.CLOSED: EventKind.TRANSPORT_CLOSED,
    TransportEventKind.FAILED: EventKind.TRANSPORT_FAILED,
}


class TvDriver:
    """Drives one TV through the host's callback model.

    All callbacks (transport events, scheduled reconnects, commands) are
    expected on a single logical thread of control. Hosts that deliver them
    from several threads must serialise them, as `hubctl.api.Client` does.

    Without an injected store the client key persists in the per-host YAML
    file of `FileCredentialStore`.
    """

    def __init__(
        self,
        config: TvConfig,
        *,
        transport: Transport | None = None,
        scheduler: Scheduler | None = None,
        credentials: CredentialStore | None = None,
        waker: WakeOnLanSender | None = None,
        on_attribute: AttributeSink | None = None,
    ) -> None:
        self.config = config
        self.transport = transport or WebSocketTransport()
        self.scheduler = scheduler or TimerScheduler()
        self.credentials = credentials or FileCredentialStore(config.endpoint.host)
        self.waker = waker or WakeOnLanSender(broadcast=config.broadcast)
        self.attributes: dict[str, Any] = {}
        self.state_listeners: list[Callable[[SessionState], None]] = []
        self._on_attribute = on_attribute
        self._session: Session | None = None
        self._generation = 0
        self._saved_log_level: int | None = None
        self._supervisor = ReconnectSupervisor(
            self.scheduler,
            self._reconnect,
            delay_s=config.reconnect_delay_s,
        )
        self._dispatcher = CommandDispatcher(
            lambda: self._session,
            self._send,
            self._set_attribute,
        )

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def state(self) -> SessionState:
        if self._session is None:
            return SessionState.DISCONNECTED
        return self._session.state

    @property
    def credential(self) -> str:
        if self._session is not None:
            return self._session.credential
        return self.credentials.load()

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    # Host lifecycle callbacks

    def installed(self) -> None:
        LOGGER.info("Installed %s (%s)", self.config.name, self.config.endpoint.host)
        self.initialize()

    def updated(self) -> None:
        LOGGER.info("Preferences updated for %s", self.config.name)
        self.close()
        self.initialize()

    def initialize(self) -> None:
        if self.config.debug:
            if self._saved_log_level is None:
                self._saved_log_level = PACKAGE_LOGGER.level
            PACKAGE_LOGGER.setLevel(logging.DEBUG)
            self.scheduler.call_later(self.config.debug_expiry_s, self._disable_debug)
        self.open()

    def uninstalled(self) -> None:
        self.close()

    def parse(self, text: str) -> None:
        """Handle one inbound text frame for the current session."""
        if self._session is not None:
            self._handle_frame(self._session, text)

    # Connection management

    def open(self) -> Session:
        """Start a fresh session, superseding any previous one."""
        previous = self._session
        if previous is not None and previous.state != SessionState.DISCONNECTED:
            self._apply(previous, SessionEvent(EventKind.CLOSE))

        self._generation += 1
        session = Session(self._generation, credential=self.credentials.load())
        self._session = session
        self._apply(session, SessionEvent(EventKind.OPEN))
        LOGGER.info("Connecting to %s (session %d)", self.config.endpoint.url, session.generation)

        generation = session.generation
        try:
            self.transport.open(
                self.config.endpoint.url,
                lambda event: self._on_transport_event(generation, event),
            )
        except TransportError as exc:
            self._on_transport_event(
                generation,
                TransportEvent(TransportEventKind.FAILED, str(exc)),
            )
        return session

    def close(self) -> None:
        """Close the connection; pending reconnects for it become stale."""
        session, self._session = self._session, None
        if session is None:
            self.transport.close()
            return
        self._apply(session, SessionEvent(EventKind.CLOSE))

    def power_on(self) -> str:
        """Wake the TV and schedule a connection attempt once it is on the network."""
        hardware_id = self.waker.wake(self.config.endpoint.hardware_id)
        self._set_attribute("switch", "on")
        if self.state == SessionState.DISCONNECTED:
            generation = self._session.generation if self._session else 0
            self._supervisor.schedule(generation)
        return hardware_id

    def refresh(self) -> None:
        """Status polling is not implemented; attributes are only set optimistically."""
        LOGGER.debug("refresh() is a no-op")

    # Commands

    def power_off(self) -> SendResult:
        return self._dispatcher.power_off()

    def set_volume(self, level: int) -> SendResult:
        return self._dispatcher.set_volume(level)

    def volume_up(self) -> SendResult:
        return self._dispatcher.volume_up()

    def volume_down(self) -> SendResult:
        return self._dispatcher.volume_down()

    def set_mute(self, muted: bool) -> SendResult:
        return self._dispatcher.set_mute(muted)

    def mute(self) -> SendResult:
        return self._dispatcher.mute()

    def unmute(self) -> SendResult:
        return self._dispatcher.unmute()

    def switch_input(self, input_id: str) -> SendResult:
        return self._dispatcher.switch_input(input_id)

    def launch_app(self, app_id: str) -> SendResult:
        return self._dispatcher.launch_app(app_id)

    def channel_up(self) -> SendResult:
        return self._dispatcher.channel_up()

    def channel_down(self) -> SendResult:
        return self._dispatcher.channel_down()

    def send_key(self, name: str) -> SendResult:
        return self._dispatcher.send_key(name)

    # Internals

    def _on_transport_event(self, generation: int, event: TransportEvent) -> None:
        session = self._session
        if session is None or session.generation != generation:
            LOGGER.debug("Dropping %s from superseded session %d", event.kind.value, generation)
            return

        if event.kind == TransportEventKind.MESSAGE:
            self._handle_frame(session, event.data or "")
            return

        if event.kind == TransportEventKind.FAILED:
            LOGGER.warning("Connection to %s failed: %s", self.config.endpoint.host, event.data)
        self._apply(session, SessionEvent(_TRANSPORT_EVENTS[event.kind], reason=event.data))

    def _handle_frame(self, session: Session, text: str) -> None:
        try:
            frame = parse_frame(text)
        except MalformedFrameError as exc:
            LOGGER.warning("Ignoring malformed frame: %s", exc)
            return
        self._apply(session, SessionEvent(EventKind.FRAME, frame=frame))

    def _apply(self, session: Session, event: SessionEvent) -> None:
        before = session.state
        actions = session.apply(event)
        for action in actions:
            self._perform(session, action)
        if session.state != before:
            LOGGER.debug("Session %d: %s -> %s", session.generation, before.value, session.state.value)
            for listener in list(self.state_listeners):
                listener(session.state)

    def _perform(self, session: Session, action: SessionAction) -> None:
        if action.kind == ActionKind.SEND_REGISTER:
            LOGGER.info("Registering with %s", self.config.endpoint.host)
            try:
                self.transport.send(build_register_frame(session.credential))
            except TransportError as exc:
                LOGGER.warning("Could not send registration: %s", exc)
        elif action.kind == ActionKind.STORE_CREDENTIAL:
            session.credential = action.value or ""
            try:
                self.credentials.save(session.credential)
            except HubctlError as exc:
                LOGGER.error("Paired but could not persist client key: %s", exc)
            LOGGER.info("Paired with %s", self.config.endpoint.host)
        elif action.kind == ActionKind.REPORT_FAULT:
            LOGGER.error("TV reported an error: %s", action.value)
        elif action.kind == ActionKind.CLOSE_TRANSPORT:
            self.transport.close()
        elif action.kind == ActionKind.REQUEST_RECONNECT:
            self._supervisor.schedule(session.generation)
        elif action.kind == ActionKind.LOG_RESPONSE:
            LOGGER.debug("Response for %s", action.value)

    def _reconnect(self, generation: int) -> None:
        current = self._session.generation if self._session else 0
        if generation != current:
            LOGGER.debug("Skipping stale reconnect for session %d (current %d)", generation, current)
            return
        if self.state != SessionState.DISCONNECTED:
            return
        self.open()

    def _send(self, frame: str) -> None:
        self.transport.send(frame)

    def _set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value
        LOGGER.debug("%s is %s", name, value)
        if self._on_attribute is not None:
            self._on_attribute(name, value)

    def _disable_debug(self) -> None:
        if self._saved_log_level is None:
            return
        LOGGER.info("Debug logging disabled")
        PACKAGE_LOGGER.setLevel(self._saved_log_level)
        self._saved_log_level = None
