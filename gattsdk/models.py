"""Immutable data models for the GATT driver.

All models are frozen dataclasses. They are the contract between the
transport, the gatt layer and the application.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Union

from .errors import FormatError

ADDRESS_LENGTH = 6

# The dongle supports exactly three simultaneous connections
MAX_CONNECTIONS = 3
CONNECTION_SLOTS = tuple(range(MAX_CONNECTIONS))


@dataclass(frozen=True)
class Address:
    """Bluetooth device address.

    Stored in wire order (least significant byte first). ``str()`` gives
    the display form, most significant byte first.

    Attributes:
        value: The six address bytes in wire order
    """
    value: bytes

    def __post_init__(self):
        value = bytes(self.value)
        if len(value) != ADDRESS_LENGTH:
            raise FormatError(
                f"Address must be {ADDRESS_LENGTH} bytes, got {len(value)}"
            )
        object.__setattr__(self, "value", value)

    @classmethod
    def parse(cls, text: str) -> Address:
        """Parse the colon separated display form (e.g. ``00:07:80:aa:bb:cc``)."""
        from .address import parse_address
        return parse_address(text)

    @classmethod
    def from_wire(cls, data: bytes) -> Address:
        """Build an address from six bytes in wire order."""
        return cls(bytes(data))

    def __bytes__(self) -> bytes:
        return self.value

    def __str__(self) -> str:
        from .address import format_address
        return format_address(self)


@dataclass(frozen=True)
class Disconnected:
    """No active connection."""

    connected = False


@dataclass(frozen=True)
class Connected:
    """An active connection on a dongle slot.

    Attributes:
        slot: Connection slot (0-2) on the dongle
        address: Address of the peer device
    """
    slot: int
    address: Address

    connected = True


ConnectionState = Union[Disconnected, Connected]


@dataclass(frozen=True)
class Notification:
    """An attribute value event held back for the next ``listen`` call.

    Attributes:
        handle: Attribute handle the value belongs to
        data: Attribute value bytes
    """
    handle: int
    data: bytes


# UUID bytes -> attribute handle
Characteristics = Dict[bytes, int]
