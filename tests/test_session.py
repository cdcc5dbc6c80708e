from __future__ import annotations

import pytest

from hubctl.core.model import InboundFrame, SessionState
from hubctl.core.session import ActionKind, EventKind, Session, SessionEvent, transition


def _frame(frame_type: str, **kwargs) -> SessionEvent:
    return SessionEvent(EventKind.FRAME, frame=InboundFrame(type=frame_type, **kwargs))


def _kinds(actions) -> list[ActionKind]:
    return [a.kind for a in actions]


def test_open_moves_to_connecting() -> None:
    state, actions = transition(SessionState.DISCONNECTED, SessionEvent(EventKind.OPEN))
    assert state == SessionState.CONNECTING
    assert actions == ()


def test_transport_opened_sends_register() -> None:
    state, actions = transition(SessionState.CONNECTING, SessionEvent(EventKind.TRANSPORT_OPENED))
    assert state == SessionState.AWAITING_REGISTRATION
    assert _kinds(actions) == [ActionKind.SEND_REGISTER]


def test_registered_pairs_and_stores_key() -> None:
    state, actions = transition(
        SessionState.AWAITING_REGISTRATION,
        _frame("registered", payload={"client-key": "abc123"}),
    )
    assert state == SessionState.PAIRED
    assert _kinds(actions) == [ActionKind.STORE_CREDENTIAL]
    assert actions[0].value == "abc123"


def test_reissued_key_while_paired_is_stored() -> None:
    state, actions = transition(
        SessionState.PAIRED,
        _frame("registered", payload={"client-key": "new-key"}),
    )
    assert state == SessionState.PAIRED
    assert actions[0].value == "new-key"


def test_error_during_handshake_disconnects_without_reconnect() -> None:
    state, actions = transition(
        SessionState.AWAITING_REGISTRATION,
        _frame("error", error="403 access denied"),
    )
    assert state == SessionState.DISCONNECTED
    assert _kinds(actions) == [ActionKind.REPORT_FAULT, ActionKind.CLOSE_TRANSPORT]
    assert actions[0].value == "403 access denied"


def test_error_while_paired_is_not_fatal() -> None:
    state, actions = transition(SessionState.PAIRED, _frame("error", error="404 no such service"))
    assert state == SessionState.PAIRED
    assert _kinds(actions) == [ActionKind.REPORT_FAULT]


def test_pairing_prompt_response_keeps_waiting() -> None:
    state, actions = transition(
        SessionState.AWAITING_REGISTRATION,
        _frame("response", id="register_0", payload={"pairingType": "PROMPT"}),
    )
    assert state == SessionState.AWAITING_REGISTRATION
    assert _kinds(actions) == [ActionKind.LOG_RESPONSE]


@pytest.mark.parametrize(
    "state",
    [SessionState.CONNECTING, SessionState.AWAITING_REGISTRATION, SessionState.PAIRED],
)
@pytest.mark.parametrize("kind", [EventKind.TRANSPORT_CLOSED, EventKind.TRANSPORT_FAILED])
def test_lost_connection_requests_reconnect(state: SessionState, kind: EventKind) -> None:
    new_state, actions = transition(state, SessionEvent(kind, reason="reset"))
    assert new_state == SessionState.DISCONNECTED
    assert _kinds(actions) == [ActionKind.REQUEST_RECONNECT]


def test_lost_connection_while_disconnected_is_quiet() -> None:
    state, actions = transition(SessionState.DISCONNECTED, SessionEvent(EventKind.TRANSPORT_CLOSED))
    assert state == SessionState.DISCONNECTED
    assert actions == ()


def test_frames_ignored_before_transport_opens() -> None:
    state, actions = transition(
        SessionState.CONNECTING,
        _frame("registered", payload={"client-key": "abc123"}),
    )
    assert state == SessionState.CONNECTING
    assert actions == ()


def test_close_closes_transport() -> None:
    state, actions = transition(SessionState.PAIRED, SessionEvent(EventKind.CLOSE))
    assert state == SessionState.DISCONNECTED
    assert _kinds(actions) == [ActionKind.CLOSE_TRANSPORT]


def test_session_correlation_ids_are_unique() -> None:
    session = Session(1)
    ids = [session.next_correlation_id() for _ in range(50)]
    assert len(set(ids)) == 50
    assert ids[0] == "req_1"
