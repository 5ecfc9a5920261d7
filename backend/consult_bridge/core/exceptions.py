"""Exception types raised by the bridge.

Extraction code never raises for missing or malformed call data; these are
reserved for conditions that must stop the process or reject a request.
"""


class ConsultBridgeError(Exception):
    """Base class for bridge errors."""


class ConfigurationError(ConsultBridgeError):
    """A feature is enabled without the settings it needs."""


class SignatureError(ConsultBridgeError):
    """A webhook request failed signature verification."""
