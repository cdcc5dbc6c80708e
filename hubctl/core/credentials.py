"""Client key persistence."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

import yaml

from hubctl.core.errors import CredentialStoreError

LOGGER = logging.getLogger(__name__)


class CredentialStore(Protocol):
    def load(self) -> str:
        """Return the stored client key, or an empty string."""

    def save(self, client_key: str) -> None:
        """Persist `client_key`, replacing any previous value."""


class MemoryCredentialStore:
    def __init__(self, client_key: str = "") -> None:
        self.client_key = client_key

    def load(self) -> str:
        return self.client_key

    def save(self, client_key: str) -> None:
        self.client_key = client_key


def default_credentials_path() -> Path:
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "hubctl/credentials.yaml"


class FileCredentialStore:
    """Stores client keys in a YAML mapping of host -> key."""

    def __init__(self, host: str, path: Path | None = None) -> None:
        self.host = host
        self.path = path or default_credentials_path()

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            loaded = yaml.safe_load(self.path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise CredentialStoreError(f"Could not read credentials file {self.path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise CredentialStoreError(f"Invalid YAML in {self.path}: {exc}") from exc

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise CredentialStoreError(f"Credentials file {self.path} must contain a mapping at root")
        return {str(k): str(v) for k, v in loaded.items()}

    def load(self) -> str:
        return self._read_all().get(self.host, "")

    def save(self, client_key: str) -> None:
        keys = self._read_all()
        keys[self.host] = client_key
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(yaml.safe_dump(keys, default_flow_style=False), encoding="utf-8")
        except OSError as exc:
            raise CredentialStoreError(f"Could not write credentials file {self.path}: {exc}") from exc
        LOGGER.debug("Stored client key for %s in %s", self.host, self.path)
