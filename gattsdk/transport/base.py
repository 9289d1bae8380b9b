"""Abstract base class for transport layer.

The Transport interface is the only thing the gatt layer knows about the
dongle. Implementations can be a serial port, a scripted test double, or
anything else that can send one command and hand back one decoded message
at a time.

Key principles:
- One command written per ``write`` call
- One decoded message returned per ``read`` call, in arrival order
- Blocking reads; timeouts and link failures surface as TransportError
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Type, Union

from ..errors import UnexpectedMessageError
from ..protocol.messages import Message, UnknownMessage

Received = Union[Message, UnknownMessage]


class Transport(ABC):
    """Abstract transport interface for BGAPI dongle communication.

    Transports are responsible for:
    1. Managing the link lifecycle
    2. Serializing and sending commands
    3. Receiving and decoding messages

    Transports should NOT contain GATT logic like notification buffering
    or connection tracking. They are pure communication channels.
    """

    @abstractmethod
    def open(self) -> bool:
        """Open the link to the dongle.

        Returns:
            True if the link is open, False otherwise
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the link.

        Should be safe to call multiple times.
        """
        pass

    @abstractmethod
    def is_open(self) -> bool:
        """Check if the link is currently open."""
        pass

    @abstractmethod
    def write(self, command: Message, payload: bytes = b"") -> None:
        """Send one command.

        Args:
            command: Command message to send
            payload: Trailing bytes for commands that carry a byte array
                (e.g. the value of an attribute write)

        Raises:
            TransportError: If the command could not be sent
        """
        pass

    @abstractmethod
    def receive(self) -> Received:
        """Block until the next message arrives and return it decoded."""
        pass

    def read(self, *expected: Type[Message]) -> Received:
        """Block until the next message arrives.

        Args:
            *expected: Message classes the caller is prepared to handle.
                If empty, any message is returned.

        Returns:
            The decoded message

        Raises:
            UnexpectedMessageError: If the message is none of ``expected``
            TransportError: On link failure or timeout

        Example:
            >>> event = transport.read(AttclientAttributeValueEvent)
            >>> event.atthandle
            42
        """
        received = self.receive()
        if expected and not isinstance(received, expected):
            names = ", ".join(cls.__name__ for cls in expected)
            raise UnexpectedMessageError(
                f"Expected {names}, got {type(received).__name__}",
                received=received,
            )
        return received

    def __enter__(self) -> Transport:
        """Context manager support - open on enter."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - close on exit."""
        self.close()
