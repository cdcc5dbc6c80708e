from __future__ import annotations

from pathlib import Path

import pytest

from hubctl.core.config import load_config
from hubctl.core.errors import ConfigError, ConfigValidationError


def _write_config(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_default_location(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    _write_config(
        tmp_path / "cfg" / "hubctl" / "config.yaml",
        """
host: 192.168.1.50
mac: "aa:bb:cc:dd:ee:ff"
""",
    )

    config = load_config()
    assert config.endpoint.host == "192.168.1.50"
    assert config.endpoint.hardware_id == "AABBCCDDEEFF"
    assert config.endpoint.url == "wss://192.168.1.50:3001/"
    assert config.reconnect_delay_s == 5.0
    assert config.debug is False
    assert config.name == "LG TV"


def test_optional_fields(tmp_path: Path) -> None:
    path = tmp_path / "tv.yaml"
    _write_config(
        path,
        """
host: tv.local
mac: "AA-BB-CC-DD-EE-FF"
name: Living room
reconnect_delay_s: 10
debug: true
debug_expiry_s: 600
broadcast: 192.168.1.255
""",
    )

    config = load_config(path)
    assert config.name == "Living room"
    assert config.reconnect_delay_s == 10.0
    assert config.debug is True
    assert config.debug_expiry_s == 600.0
    assert config.broadcast == "192.168.1.255"


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")


def test_missing_required_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tv.yaml"
    _write_config(path, "host: 192.168.1.50\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_unknown_key_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tv.yaml"
    _write_config(path, 'host: tv.local\nmac: "AABBCCDDEEFF"\nport: 3000\n')
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_bad_mac_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tv.yaml"
    _write_config(path, 'host: tv.local\nmac: "ZZ:BB:CC:DD:EE:FF"\n')
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_duplicate_yaml_keys_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tv.yaml"
    _write_config(path, 'host: a.local\nhost: b.local\nmac: "AABBCCDDEEFF"\n')
    with pytest.raises(ConfigValidationError):
        load_config(path)


def test_non_mapping_root_rejected(tmp_path: Path) -> None:
    path = tmp_path / "tv.yaml"
    _write_config(path, "- host\n- mac\n")
    with pytest.raises(ConfigValidationError):
        load_config(path)
