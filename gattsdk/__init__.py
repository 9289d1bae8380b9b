"""BLE GATT client SDK for BGAPI USB dongles."""

from .address import format_address, parse_address
from .errors import (
    GattError,
    FormatError,
    StateError,
    ProtocolError,
    UnexpectedMessageError,
    CommandError,
    TransportError,
    TransportTimeoutError,
)
from .models import (
    Address,
    Connected,
    Disconnected,
    Notification,
)
from .gatt import GattClient
from .transport import Transport, SerialTransport, ScriptedTransport

__all__ = [
    "parse_address",
    "format_address",
    "GattError",
    "FormatError",
    "StateError",
    "ProtocolError",
    "UnexpectedMessageError",
    "CommandError",
    "TransportError",
    "TransportTimeoutError",
    "Address",
    "Connected",
    "Disconnected",
    "Notification",
    "GattClient",
    "Transport",
    "SerialTransport",
    "ScriptedTransport",
]
