"""BGAPI binary protocol implementation.

Wraps ProtocolParser and ProtocolSerializer.
"""
from __future__ import annotations

from typing import Union

from .base import Protocol
from .messages import Message, UnknownMessage
from .parser import ProtocolParser
from .serializer import HEADER_LENGTH, ProtocolSerializer


class BGAPIProtocol(Protocol):
    """Binary protocol spoken by BLED112 style dongles.

    Uses:
    - 4 byte headers carrying an 11 bit payload length
    - Little-endian fixed fields
    - Length prefixed byte arrays
    """

    def __init__(self):
        self._parser = ProtocolParser()
        self._serializer = ProtocolSerializer()

    @property
    def header_length(self) -> int:
        return HEADER_LENGTH

    def payload_length(self, header: bytes) -> int:
        return self._parser.payload_length(header)

    def parse_frame(self, frame: bytes) -> Union[Message, UnknownMessage]:
        """Parse a frame received from the dongle."""
        return self._parser.parse_frame(frame)

    def serialize_command(self, command: Message, payload: bytes = b"") -> bytes:
        return self._serializer.serialize_command(command, payload)

    @property
    def name(self) -> str:
        return "bgapi"
