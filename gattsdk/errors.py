"""Exception taxonomy for the GATT driver.

All errors are raised synchronously by the call that detects them and are
never retried internally.
"""
from __future__ import annotations

from typing import Optional


class GattError(RuntimeError):
    """Base error for gattsdk."""
    pass


class FormatError(GattError, ValueError):
    """Raised when a device address is malformed."""
    pass


class StateError(GattError):
    """Raised when an operation needs a connection that does not exist."""
    pass


class ProtocolError(GattError):
    """Raised when received data disagrees with its declared framing."""
    pass


class UnexpectedMessageError(ProtocolError):
    """Raised when a message arrives that nobody is waiting for."""
    def __init__(self, message, received=None):
        super().__init__(message)
        self.received = received  # the decoded message


class CommandError(GattError):
    """Raised when the dongle rejects a command with a non-zero result."""
    def __init__(self, message, result: Optional[int] = None):
        super().__init__(message)
        self.result = result


class TransportError(GattError):
    """Base transport error."""
    pass


class TransportTimeoutError(TransportError):
    """Raised when a transport read runs out of time mid-frame."""
    pass
