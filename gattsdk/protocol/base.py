"""Abstract base class for dongle wire protocols.

Defines the interface for framing, parsing incoming frames and serializing
commands.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Union

from .messages import Message, UnknownMessage


class Protocol(ABC):
    """Abstract protocol for dongle communication.

    Protocols handle:
    - Finding frame boundaries in the byte stream
    - Parsing frames into messages
    - Serializing commands into wire format
    """

    @property
    @abstractmethod
    def header_length(self) -> int:
        """Number of bytes to read before the payload length is known."""
        pass

    @abstractmethod
    def payload_length(self, header: bytes) -> int:
        """Number of payload bytes that follow ``header``."""
        pass

    @abstractmethod
    def parse_frame(self, frame: bytes) -> Union[Message, UnknownMessage]:
        """Parse one complete frame (header plus payload) into a message."""
        pass

    @abstractmethod
    def serialize_command(self, command: Message, payload: bytes = b"") -> bytes:
        """Serialize a command (and its trailing payload) into a frame."""
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Protocol identifier (e.g., 'bgapi')."""
        pass
