from __future__ import annotations

import pytest

from hubctl.core.errors import MalformedFrameError
from hubctl.sensors.soil_moisture import SensorEvent, decode_attribute, parse_description


def test_decode_moisture() -> None:
    assert decode_attribute(0x0408, 0x0000, 0x06E2) == SensorEvent("moisture", 17.62, "%")


def test_decode_negative_temperature() -> None:
    assert decode_attribute(0x0402, 0x0000, 0xFF38) == SensorEvent("temperature", -2.0, "C")


def test_decode_temperature_fahrenheit() -> None:
    event = decode_attribute(0x0402, 0x0000, 2000, temperature_scale="F")
    assert event == SensorEvent("temperature", 68.0, "F")


def test_decode_battery() -> None:
    assert decode_attribute(0x0001, 0x0021, 0xC8) == SensorEvent("battery", 100.0, "%")
    assert decode_attribute(0x0001, 0x0020, 30) == SensorEvent("battery_voltage", 3.0, "V")


def test_unknown_pair_returns_none() -> None:
    assert decode_attribute(0x0006, 0x0000, 1) is None


def test_parse_description() -> None:
    description = (
        "read attr - raw: 9C4D0104080A000021E206, dni: 9C4D, endpoint: 01, "
        "cluster: 0408, size: 0A, attrId: 0000, encoding: 21, command: 0A, value: 06E2"
    )
    assert parse_description(description) == SensorEvent("moisture", 17.62, "%")


def test_parse_description_missing_fields() -> None:
    with pytest.raises(MalformedFrameError):
        parse_description("catchall: 0104 0006 01 01 0040 00 9C4D 00 00 0000 0B 01 0000")
