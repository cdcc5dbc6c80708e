"""Command dispatch: high-level intents to SSAP request frames."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hubctl.core.errors import CommandError, NotReadyError
from hubctl.core.model import SendResult
from hubctl.core.protocol import build_request_frame, build_uri
from hubctl.core.session import Session

LOGGER = logging.getLogger(__name__)

AttributeSink = Callable[[str, Any], None]

URI_TURN_OFF = "system/turnOff"
URI_SET_VOLUME = "audio/setVolume"
URI_VOLUME_UP = "audio/volumeUp"
URI_VOLUME_DOWN = "audio/volumeDown"
URI_SET_MUTE = "audio/setMute"
URI_SWITCH_INPUT = "tv/switchInput"
URI_LAUNCH = "system.launcher/launch"
URI_CHANNEL_UP = "tv/channelUp"
URI_CHANNEL_DOWN = "tv/channelDown"
URI_GENERATE_KEY = "input/generateKey"


class CommandDispatcher:
    """Sends fire-and-forget requests on the current paired session.

    Volume, mute, input, and power commands update the cached attributes
    immediately; nothing reconciles them against the TV afterwards.
    """

    def __init__(
        self,
        session_provider: Callable[[], Session | None],
        send: Callable[[str], None],
        on_attribute: AttributeSink,
    ) -> None:
        self._session_provider = session_provider
        self._send = send
        self._on_attribute = on_attribute

    def dispatch(self, path: str, params: dict[str, Any] | None = None) -> SendResult:
        session = self._session_provider()
        if session is None or not session.is_paired:
            state = session.state.value if session is not None else "no session"
            raise NotReadyError(f"Cannot send '{path}': TV is not paired ({state})")

        uri = build_uri(path)
        payload = dict(params or {})
        correlation_id = session.next_correlation_id()
        self._send(build_request_frame(uri, correlation_id, payload))
        LOGGER.debug("Sent %s id=%s payload=%s", uri, correlation_id, payload)
        return SendResult(uri=uri, correlation_id=correlation_id, payload=payload)

    def power_off(self) -> SendResult:
        result = self.dispatch(URI_TURN_OFF)
        self._on_attribute("switch", "off")
        return result

    def set_volume(self, level: int) -> SendResult:
        if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level <= 100:
            raise CommandError(f"Volume must be an integer between 0 and 100, got {level!r}")
        result = self.dispatch(URI_SET_VOLUME, {"volume": str(level)})
        self._on_attribute("volume", level)
        return result

    def volume_up(self) -> SendResult:
        return self.dispatch(URI_VOLUME_UP)

    def volume_down(self) -> SendResult:
        return self.dispatch(URI_VOLUME_DOWN)

    def set_mute(self, muted: bool) -> SendResult:
        result = self.dispatch(URI_SET_MUTE, {"mute": bool(muted)})
        self._on_attribute("mute", "muted" if muted else "unmuted")
        return result

    def mute(self) -> SendResult:
        return self.set_mute(True)

    def unmute(self) -> SendResult:
        return self.set_mute(False)

    def switch_input(self, input_id: str) -> SendResult:
        input_id = _require_text(input_id, "Input id")
        result = self.dispatch(URI_SWITCH_INPUT, {"inputId": input_id})
        self._on_attribute("input_source", input_id)
        return result

    def launch_app(self, app_id: str) -> SendResult:
        return self.dispatch(URI_LAUNCH, {"id": _require_text(app_id, "App id")})

    def channel_up(self) -> SendResult:
        return self.dispatch(URI_CHANNEL_UP)

    def channel_down(self) -> SendResult:
        return self.dispatch(URI_CHANNEL_DOWN)

    def send_key(self, name: str) -> SendResult:
        return self.dispatch(URI_GENERATE_KEY, {"name": _require_text(name, "Key name").upper()})


def _require_text(value: str, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CommandError(f"{what} must be a non-empty string")
    return value.strip()


def _parse_volume(value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise CommandError(f"Volume must be an integer, got '{value}'") from exc


@dataclass(frozen=True)
class Intent:
    name: str
    method: str
    help: str
    argument: str | None = None
    convert: Callable[[str], Any] | None = None


INTENTS: dict[str, Intent] = {
    intent.name: intent
    for intent in (
        Intent("power-off", "power_off", "Turn the TV off"),
        Intent("volume", "set_volume", "Set the volume (0-100)", "LEVEL", _parse_volume),
        Intent("volume-up", "volume_up", "Raise the volume one step"),
        Intent("volume-down", "volume_down", "Lower the volume one step"),
        Intent("mute", "mute", "Mute audio"),
        Intent("unmute", "unmute", "Unmute audio"),
        Intent("input", "switch_input", "Switch input source", "INPUT_ID"),
        Intent("launch", "launch_app", "Launch an app", "APP_ID"),
        Intent("channel-up", "channel_up", "Next channel"),
        Intent("channel-down", "channel_down", "Previous channel"),
        Intent("key", "send_key", "Press a remote key", "KEY_NAME"),
    )
}


def run_intent(target: Any, name: str, value: str | None = None) -> SendResult:
    """Invoke the intent called `name` on `target` (a dispatcher or driver)."""
    intent = INTENTS.get(name)
    if intent is None:
        available = ", ".join(sorted(INTENTS))
        raise CommandError(f"Unknown command '{name}'. Available: {available}")

    method = getattr(target, intent.method)
    if intent.argument is None:
        if value is not None:
            raise CommandError(f"Command '{name}' takes no value")
        return method()

    if value is None:
        raise CommandError(f"Command '{name}' requires a {intent.argument} value")
    return method(intent.convert(value) if intent.convert else value)
