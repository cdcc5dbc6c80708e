"""Decode table for Zigbee soil moisture sensor attribute reports."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from hubctl.core.errors import MalformedFrameError

CLUSTER_POWER = 0x0001
CLUSTER_TEMPERATURE = 0x0402
CLUSTER_SOIL_MOISTURE = 0x0408

_FIELD_RE = re.compile(r"(\w+):\s*([0-9A-Fa-f]+)")


@dataclass(frozen=True)
class SensorEvent:
    name: str
    value: float
    unit: str


@dataclass(frozen=True)
class _Decoder:
    name: str
    unit: str
    convert: Callable[[int], float]


def _int16(raw: int) -> int:
    return raw - 0x10000 if raw & 0x8000 else raw


DECODERS: dict[tuple[int, int], _Decoder] = {
    (CLUSTER_SOIL_MOISTURE, 0x0000): _Decoder("moisture", "%", lambda raw: raw / 100),
    (CLUSTER_TEMPERATURE, 0x0000): _Decoder("temperature", "C", lambda raw: _int16(raw) / 100),
    (CLUSTER_POWER, 0x0021): _Decoder("battery", "%", lambda raw: raw / 2),
    (CLUSTER_POWER, 0x0020): _Decoder("battery_voltage", "V", lambda raw: raw / 10),
}


def decode_attribute(
    cluster: int,
    attribute: int,
    raw: int,
    *,
    temperature_scale: str = "C",
) -> SensorEvent | None:
    decoder = DECODERS.get((cluster, attribute))
    if decoder is None:
        return None

    value = decoder.convert(raw)
    unit = decoder.unit
    if decoder.name == "temperature" and temperature_scale.upper() == "F":
        value = value * 9 / 5 + 32
        unit = "F"
    return SensorEvent(name=decoder.name, value=round(value, 2), unit=unit)


def parse_description(description: str, *, temperature_scale: str = "C") -> SensorEvent | None:
    """Decode a hub report line such as
    ``read attr - raw: ..., cluster: 0408, attrId: 0000, value: 06E2``.
    """
    fields = {key.lower(): value for key, value in _FIELD_RE.findall(description)}
    try:
        cluster = int(fields["cluster"], 16)
        attribute = int(fields["attrid"], 16)
        raw = int(fields["value"], 16)
    except KeyError as exc:
        raise MalformedFrameError(f"Sensor report is missing {exc.args[0]!r}: {description}") from exc
    return decode_attribute(cluster, attribute, raw, temperature_scale=temperature_scale)
