"""Protocol serializer for BGAPI messages.

Converts message objects to binary frames.
Pure functions with no side effects.
"""
from __future__ import annotations

import struct
from dataclasses import astuple, fields

from ..errors import ProtocolError
from .messages import Message, MessageKind

HEADER_LENGTH = 4
MAX_PAYLOAD_LENGTH = 0x7FF  # 11 bit length field

MESSAGE_TYPE_EVENT = 0x80
TECHNOLOGY_BLUETOOTH_SMART = 0x00


class ProtocolSerializer:
    """Serializer for the BGAPI binary protocol.

    Turns commands (and, for test scripts, responses and events) into
    frames the dongle understands.
    """

    @staticmethod
    def serialize_message(message: Message, payload: bytes = b"") -> bytes:
        """Convert a message object to a complete frame.

        Args:
            message: Registered BGAPI message
            payload: Extra bytes appended after the message fields, e.g. the
                value of an attribute write

        Returns:
            Header followed by the encoded payload

        Examples:
            >>> ProtocolSerializer.serialize_message(GapDiscover(mode=1))
            b'\\x00\\x01\\x06\\x02\\x01'
        """
        if not isinstance(message, Message):
            raise ValueError(f"Unknown message type: {type(message)}")

        body = ProtocolSerializer._pack_fields(message) + bytes(payload)
        header = ProtocolSerializer.build_header(
            message.KIND, message.CLASS_ID, message.MESSAGE_ID, len(body)
        )
        return header + body

    @staticmethod
    def serialize_command(command: Message, payload: bytes = b"") -> bytes:
        """Serialize a command, rejecting anything that is not one."""
        if getattr(command, "KIND", None) is not MessageKind.COMMAND:
            raise ValueError(f"Not a command: {type(command).__name__}")
        return ProtocolSerializer.serialize_message(command, payload)

    @staticmethod
    def build_header(kind: MessageKind, class_id: int, message_id: int, length: int) -> bytes:
        """Build the 4 byte BGAPI header.

        Byte 0 holds the message type bit, the technology and the three high
        bits of the payload length; byte 1 the low eight bits.
        """
        if length > MAX_PAYLOAD_LENGTH:
            raise ProtocolError(f"Payload of {length} bytes exceeds {MAX_PAYLOAD_LENGTH}")

        first = TECHNOLOGY_BLUETOOTH_SMART | ((length >> 8) & 0x07)
        if kind is MessageKind.EVENT:
            first |= MESSAGE_TYPE_EVENT
        return bytes((first, length & 0xFF, class_id, message_id))

    @staticmethod
    def _pack_fields(message: Message) -> bytes:
        values = astuple(message)
        trailing = b""
        if message.TRAILING is not None:
            names = [f.name for f in fields(message)]
            index = names.index(message.TRAILING)
            trailing = bytes(values[index])
            values = values[:index] + values[index + 1:]

        try:
            return struct.pack(message.FORMAT, *values) + trailing
        except struct.error as e:
            raise ValueError(f"Cannot encode {type(message).__name__}: {e}") from e
