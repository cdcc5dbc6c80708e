from __future__ import annotations

import json
from typing import Any

import pytest

from hubctl.core.dispatcher import CommandDispatcher, run_intent
from hubctl.core.errors import CommandError, NotReadyError
from hubctl.core.model import SessionState
from hubctl.core.session import Session


class Recorder:
    def __init__(self) -> None:
        self.frames: list[dict[str, Any]] = []
        self.attributes: dict[str, Any] = {}

    def send(self, frame: str) -> None:
        self.frames.append(json.loads(frame))

    def set_attribute(self, name: str, value: Any) -> None:
        self.attributes[name] = value


def _dispatcher(state: SessionState = SessionState.PAIRED) -> tuple[CommandDispatcher, Recorder, Session]:
    session = Session(1, credential="abc123")
    session.state = state
    recorder = Recorder()
    return CommandDispatcher(lambda: session, recorder.send, recorder.set_attribute), recorder, session


def test_set_volume_frame_and_optimistic_attribute() -> None:
    dispatcher, recorder, _ = _dispatcher()

    result = dispatcher.set_volume(37)

    frame = recorder.frames[-1]
    assert frame["type"] == "request"
    assert frame["uri"] == "ssap://audio/setVolume"
    assert frame["payload"]["volume"] == "37"
    assert frame["id"] == result.correlation_id
    assert recorder.attributes["volume"] == 37


@pytest.mark.parametrize(
    "state",
    [SessionState.DISCONNECTED, SessionState.CONNECTING, SessionState.AWAITING_REGISTRATION],
)
def test_dispatch_before_pairing_sends_nothing(state: SessionState) -> None:
    dispatcher, recorder, _ = _dispatcher(state)

    with pytest.raises(NotReadyError):
        dispatcher.set_volume(10)

    assert recorder.frames == []
    assert recorder.attributes == {}


def test_dispatch_without_session_is_not_ready() -> None:
    recorder = Recorder()
    dispatcher = CommandDispatcher(lambda: None, recorder.send, recorder.set_attribute)
    with pytest.raises(NotReadyError):
        dispatcher.channel_up()
    assert recorder.frames == []


def test_correlation_ids_unique_within_session() -> None:
    dispatcher, recorder, _ = _dispatcher()
    for _ in range(10):
        dispatcher.volume_up()
        dispatcher.channel_down()
    ids = [frame["id"] for frame in recorder.frames]
    assert len(ids) == len(set(ids)) == 20
    assert all(i.startswith("req_") for i in ids)


def test_mute_and_input_update_attributes() -> None:
    dispatcher, recorder, _ = _dispatcher()

    dispatcher.mute()
    assert recorder.frames[-1]["uri"] == "ssap://audio/setMute"
    assert recorder.frames[-1]["payload"] == {"mute": True}
    assert recorder.attributes["mute"] == "muted"

    dispatcher.unmute()
    assert recorder.frames[-1]["payload"] == {"mute": False}
    assert recorder.attributes["mute"] == "unmuted"

    dispatcher.switch_input("HDMI_2")
    assert recorder.frames[-1]["uri"] == "ssap://tv/switchInput"
    assert recorder.frames[-1]["payload"] == {"inputId": "HDMI_2"}
    assert recorder.attributes["input_source"] == "HDMI_2"


def test_power_off_and_other_uris() -> None:
    dispatcher, recorder, _ = _dispatcher()

    dispatcher.power_off()
    dispatcher.launch_app("netflix")
    dispatcher.send_key("home")
    dispatcher.volume_down()

    uris = [frame["uri"] for frame in recorder.frames]
    assert uris == [
        "ssap://system/turnOff",
        "ssap://system.launcher/launch",
        "ssap://input/generateKey",
        "ssap://audio/volumeDown",
    ]
    assert recorder.frames[1]["payload"] == {"id": "netflix"}
    assert recorder.frames[2]["payload"] == {"name": "HOME"}
    assert recorder.attributes["switch"] == "off"


@pytest.mark.parametrize("level", [-1, 101, True, "50"])
def test_invalid_volume_rejected(level) -> None:
    dispatcher, recorder, _ = _dispatcher()
    with pytest.raises(CommandError):
        dispatcher.set_volume(level)
    assert recorder.frames == []


def test_run_intent_converts_values() -> None:
    dispatcher, recorder, _ = _dispatcher()

    result = run_intent(dispatcher, "volume", "25")

    assert result.uri == "ssap://audio/setVolume"
    assert recorder.frames[-1]["payload"] == {"volume": "25"}


def test_run_intent_errors() -> None:
    dispatcher, _, _ = _dispatcher()

    with pytest.raises(CommandError) as exc:
        run_intent(dispatcher, "rewind")
    assert "Available:" in str(exc.value)

    with pytest.raises(CommandError):
        run_intent(dispatcher, "volume")
    with pytest.raises(CommandError):
        run_intent(dispatcher, "mute", "yes")
    with pytest.raises(CommandError):
        run_intent(dispatcher, "volume", "loud")
