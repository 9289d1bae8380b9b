"""Protocol layer for binary communication with the BLE dongle."""

from .base import Protocol
from .bgapi import BGAPIProtocol
from .parser import ProtocolParser
from .serializer import ProtocolSerializer
from .messages import (
    Message,
    MessageKind,
    UnknownMessage,
    ConnectionStatusFlags,
    GapAddressType,
    GapDiscoverMode,
)

__all__ = [
    "Protocol",
    "BGAPIProtocol",
    "ProtocolParser",
    "ProtocolSerializer",
    "Message",
    "MessageKind",
    "UnknownMessage",
    "ConnectionStatusFlags",
    "GapAddressType",
    "GapDiscoverMode",
]
