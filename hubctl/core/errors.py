"""Domain-specific errors for hubctl."""


class HubctlError(Exception):
    """Base error for hubctl."""


class ConfigError(HubctlError):
    """Raised when the configuration file cannot be read."""


class ConfigValidationError(ConfigError):
    """Raised when a configuration file does not conform to schema or semantics."""


class CredentialStoreError(HubctlError):
    """Raised when the stored client key cannot be read or written."""


class InvalidHardwareIdError(HubctlError):
    """Raised when a MAC address cannot be normalized."""


class ProtocolError(HubctlError):
    """Raised when the TV answers with an error frame."""


class MalformedFrameError(ProtocolError):
    """Raised when an inbound payload cannot be parsed."""


class NotReadyError(HubctlError):
    """Raised when a command is issued before pairing completes."""


class CommandError(HubctlError):
    """Raised when a command argument is invalid."""


class TransportError(HubctlError):
    """Base transport error."""


class TransportConnectError(TransportError):
    """Raised on WebSocket connect failures."""


class TransportSendError(TransportError):
    """Raised when payload sending fails."""


class TransportTimeoutError(TransportError):
    """Raised when waiting on the connection times out."""
