"""Configuration loading and validation for the YAML device file."""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from hubctl.core.errors import ConfigError, ConfigValidationError, InvalidHardwareIdError
from hubctl.core.model import Endpoint, TvConfig
from hubctl.transports.wol import normalize_hardware_id

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def _load_schema_validator() -> Any:
    schema_text = resources.files("hubctl.schemas").joinpath("config.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def default_config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "hubctl/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def build_config(doc: dict[str, Any], source: Path | str = "<config>") -> TvConfig:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    try:
        hardware_id = normalize_hardware_id(doc["mac"])
    except InvalidHardwareIdError as exc:
        raise ConfigValidationError(f"{source}: {exc}") from exc

    return TvConfig(
        endpoint=Endpoint(host=doc["host"].strip(), hardware_id=hardware_id),
        name=doc.get("name", "LG TV"),
        reconnect_delay_s=float(doc.get("reconnect_delay_s", 5.0)),
        debug=doc.get("debug", False),
        debug_expiry_s=float(doc.get("debug_expiry_s", 1800.0)),
        broadcast=doc.get("broadcast", "255.255.255.255"),
    )


def load_config(path: Path | None = None) -> TvConfig:
    config_path = path or default_config_path()
    if not config_path.exists():
        raise ConfigError(
            f"No config file at {config_path}. Create one with at least 'host' and 'mac'."
        )
    config = build_config(_read_yaml(config_path), config_path)
    LOGGER.debug("Loaded config for %s from %s", config.endpoint.host, config_path)
    return config
