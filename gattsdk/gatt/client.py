"""GATT client facade.

Wires the connection manager, attribute client, characteristic directory
and notification listener to one transport and one event buffer.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from ..models import Address, Characteristics, ConnectionState
from ..transport.base import Transport
from .attributes import AttributeClient
from .characteristics import CharacteristicDirectory
from .connection import ConnectionManager, DeviceCallback
from .events import EventBuffer
from .notifications import NotificationCallback, NotificationListener
from .reader import ResponseReader

logger = logging.getLogger(__name__)


class GattClient:
    """High-level GATT client on top of a BGAPI transport.

    This class acts as a facade, managing:
    1. Connection state and slots (ConnectionManager)
    2. Attribute reads and writes (AttributeClient)
    3. Characteristic enumeration (CharacteristicDirectory)
    4. Notification delivery (NotificationListener)

    Every call blocks until the dongle has answered. The client is not
    thread-safe; serialize access externally if several threads share it.

    Example:
        >>> with SerialTransport() as transport, GattClient(transport) as client:
        ...     client.connect("00:07:80:2d:9e:f1")
        ...     client.write_attribute(0x0019, b"\\x01\\x00")
        ...     client.listen(lambda handle, data: print(handle, data.hex()))
    """

    def __init__(self, transport: Transport):
        """Initialize GATT client.

        Args:
            transport: Open transport to the dongle
        """
        self._transport = transport
        self._events = EventBuffer()
        self._reader = ResponseReader(transport, self._events)

        self._connection = ConnectionManager(self._reader)
        self._attributes = AttributeClient(self._reader, self._connection)
        self._directory = CharacteristicDirectory(self._reader, self._connection)
        self._listener = NotificationListener(self._reader)

    # --- Connection ---

    def discover(self, on_device: DeviceCallback) -> None:
        """Scan until ``on_device(rssi, address, data)`` returns False."""
        self._connection.discover(on_device)

    def connect(self, address: Union[Address, str]) -> None:
        """Connect to ``address``, reviving an existing dongle connection if possible."""
        self._connection.connect(address)

    def disconnect(self, slot: Optional[int] = None) -> None:
        """Disconnect ``slot``, or the active connection if omitted."""
        self._connection.disconnect(slot)

    def disconnect_all(self) -> None:
        """Disconnect all three dongle slots."""
        self._connection.disconnect_all()

    @property
    def connected(self) -> bool:
        return self._connection.connected

    @property
    def address(self) -> Address:
        """Peer address; raises StateError when not connected."""
        return self._connection.address

    @property
    def state(self) -> ConnectionState:
        return self._connection.state

    # --- Attributes ---

    def write_attribute(self, handle: int, payload: bytes) -> None:
        self._attributes.write_attribute(handle, payload)

    def read_attribute(self, handle: int) -> bytes:
        return self._attributes.read_attribute(handle)

    def discover_characteristics(self) -> Characteristics:
        return self._directory.discover_characteristics()

    # --- Notifications ---

    def listen(self, on_notification: NotificationCallback) -> None:
        """Deliver buffered notifications, then block for one new one."""
        self._listener.listen(on_notification)

    @property
    def pending_notifications(self) -> int:
        """Number of notifications waiting for the next ``listen``."""
        return len(self._events)

    def __enter__(self) -> GattClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager support - release every dongle slot on exit."""
        logger.info("Releasing all connection slots")
        self.disconnect_all()
