"""SSAP message framing for the LG webOS control socket."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any

from hubctl.core.errors import MalformedFrameError
from hubctl.core.model import InboundFrame

REGISTER_ID = "register_0"
URI_SCHEME = "ssap://"

TYPE_REGISTER = "register"
TYPE_REGISTERED = "registered"
TYPE_REQUEST = "request"
TYPE_RESPONSE = "response"
TYPE_ERROR = "error"

_CLIENT_KEY = "client-key"


@lru_cache(maxsize=1)
def load_manifest() -> dict[str, Any]:
    """Return the fixed capability manifest sent with every registration."""
    manifest_text = resources.files("hubctl.data").joinpath("manifest.json").read_text(
        encoding="utf-8"
    )
    return json.loads(manifest_text)


def build_uri(path: str) -> str:
    if path.startswith(URI_SCHEME):
        return path
    return URI_SCHEME + path.lstrip("/")


def build_register_frame(client_key: str) -> str:
    return json.dumps(
        {
            "type": TYPE_REGISTER,
            "id": REGISTER_ID,
            "payload": {
                _CLIENT_KEY: client_key or "",
                "manifest": load_manifest(),
            },
        }
    )


def build_request_frame(uri: str, correlation_id: str, payload: dict[str, Any]) -> str:
    return json.dumps(
        {
            "type": TYPE_REQUEST,
            "uri": uri,
            "id": correlation_id,
            "payload": payload,
        }
    )


def parse_frame(text: str | bytes) -> InboundFrame:
    """Decode an inbound text frame.

    Raises MalformedFrameError when the frame is not a JSON object with a
    string ``type``, or when a ``registered`` frame lacks its client key.
    """
    try:
        doc = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise MalformedFrameError(f"Inbound frame is not valid JSON: {exc}") from exc

    if not isinstance(doc, dict):
        raise MalformedFrameError("Inbound frame must be a JSON object")

    frame_type = doc.get("type")
    if not isinstance(frame_type, str) or not frame_type:
        raise MalformedFrameError("Inbound frame is missing its 'type'")

    payload = doc.get("payload")
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise MalformedFrameError(f"Inbound '{frame_type}' frame has a non-object payload")

    if frame_type == TYPE_REGISTERED and not isinstance(payload.get(_CLIENT_KEY), str):
        raise MalformedFrameError("Inbound 'registered' frame carries no client key")

    frame_id = doc.get("id")
    error = doc.get("error")
    return InboundFrame(
        type=frame_type,
        id=str(frame_id) if frame_id is not None else None,
        payload=payload,
        error=str(error) if error is not None else None,
    )


def client_key_of(frame: InboundFrame) -> str:
    return frame.payload[_CLIENT_KEY]
