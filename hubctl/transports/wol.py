"""Wake-on-LAN magic packet sender."""

from __future__ import annotations

import logging
import re
import socket

from hubctl.core.errors import InvalidHardwareIdError, TransportSendError

_SEPARATORS_RE = re.compile(r"[\s:.\-]")
_HEX12_RE = re.compile(r"^[0-9A-F]{12}$")
WOL_PORT = 9
LOGGER = logging.getLogger(__name__)


def normalize_hardware_id(hardware_id: str) -> str:
    normalized = _SEPARATORS_RE.sub("", hardware_id).upper()
    if not _HEX12_RE.match(normalized):
        raise InvalidHardwareIdError(
            f"Hardware id '{hardware_id}' is not a 48-bit MAC address"
        )
    return normalized


def magic_packet(hardware_id: str) -> bytes:
    mac = bytes.fromhex(normalize_hardware_id(hardware_id))
    return b"\xff" * 6 + mac * 16


class WakeOnLanSender:
    def __init__(self, *, broadcast: str = "255.255.255.255", port: int = WOL_PORT) -> None:
        self.broadcast = broadcast
        self.port = port

    def wake(self, hardware_id: str) -> str:
        """Broadcast a magic packet and return the normalized hardware id."""
        normalized = normalize_hardware_id(hardware_id)
        packet = magic_packet(normalized)
        try:
            with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
                sock.sendto(packet, (self.broadcast, self.port))
        except OSError as exc:
            raise TransportSendError(f"Wake-on-LAN send to {self.broadcast} failed: {exc}") from exc
        LOGGER.info("Sent wake packet to %s via %s:%d", normalized, self.broadcast, self.port)
        return normalized
