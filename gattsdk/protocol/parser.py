"""Protocol parser for BGAPI frames.

Parses binary frames coming from the dongle into message objects.
Pure functions with no side effects.
"""
from __future__ import annotations

import struct
from typing import Tuple, Union

from ..errors import ProtocolError
from .messages import COMMANDS, EVENTS, RESPONSES, Message, MessageKind, UnknownMessage
from .serializer import HEADER_LENGTH, MESSAGE_TYPE_EVENT, TECHNOLOGY_BLUETOOTH_SMART


class ProtocolParser:
    """Parser for the BGAPI binary protocol.

    A frame is a 4 byte header followed by the payload:
    - byte 0: message type (bit 7), technology (bits 6-3), length bits 10-8
    - byte 1: length bits 7-0
    - byte 2: class id
    - byte 3: message id
    """

    @staticmethod
    def parse_header(header: bytes) -> Tuple[bool, int, int, int]:
        """Split a header into its parts.

        Returns:
            (is_event, payload_length, class_id, message_id)

        Raises:
            ProtocolError: If the header is short or not for Bluetooth Smart
        """
        if len(header) < HEADER_LENGTH:
            raise ProtocolError(f"Header needs {HEADER_LENGTH} bytes, got {len(header)}")

        first, low, class_id, message_id = header[:HEADER_LENGTH]
        technology = first & 0x78
        if technology != TECHNOLOGY_BLUETOOTH_SMART:
            raise ProtocolError(f"Unsupported technology type 0x{technology >> 3:x}")

        length = ((first & 0x07) << 8) | low
        return bool(first & MESSAGE_TYPE_EVENT), length, class_id, message_id

    @staticmethod
    def payload_length(header: bytes) -> int:
        """Number of payload bytes that follow this header."""
        return ProtocolParser.parse_header(header)[1]

    @staticmethod
    def parse_frame(frame: bytes, from_host: bool = False) -> Union[Message, UnknownMessage]:
        """Parse one complete frame.

        Args:
            frame: Header plus payload
            from_host: Interpret non-event frames as commands instead of
                responses (useful when inspecting what was written)

        Returns:
            The decoded message, or UnknownMessage for (class, id) pairs
            that are not modelled

        Examples:
            >>> ProtocolParser.parse_frame(b'\\x00\\x02\\x06\\x02\\x00\\x00')
            GapDiscoverResponse(result=0)
        """
        is_event, length, class_id, message_id = ProtocolParser.parse_header(frame)
        payload = bytes(frame[HEADER_LENGTH:])
        if len(payload) != length:
            raise ProtocolError(
                f"Frame declares {length} payload bytes but carries {len(payload)}"
            )

        if is_event:
            kind, registry = MessageKind.EVENT, EVENTS
        elif from_host:
            kind, registry = MessageKind.COMMAND, COMMANDS
        else:
            kind, registry = MessageKind.RESPONSE, RESPONSES

        cls = registry.get((class_id, message_id))
        if cls is None:
            return UnknownMessage(kind, class_id, message_id, payload)
        return ProtocolParser.parse_payload(cls, payload)

    @staticmethod
    def parse_payload(cls, payload: bytes) -> Message:
        """Decode ``payload`` into an instance of the message class ``cls``."""
        size = cls.fixed_size()
        if len(payload) < size:
            raise ProtocolError(
                f"{cls.__name__} needs at least {size} bytes, got {len(payload)}"
            )

        values = struct.unpack_from(cls.FORMAT, payload)
        if cls.TRAILING is not None:
            return cls(*values, payload[size:])
        return cls(*values)
