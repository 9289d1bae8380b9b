"""Connection management: discovery, connect, disconnect.

The dongle holds up to three connections, one per slot. The manager
tracks which slot the driver is using and whether it is connected.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional, Union

from ..address import parse_address
from ..errors import CommandError, StateError
from ..models import (
    CONNECTION_SLOTS,
    Address,
    Connected,
    ConnectionState,
    Disconnected,
)
from ..protocol.messages import (
    ConnectionDisconnect,
    ConnectionDisconnectedEvent,
    ConnectionDisconnectResponse,
    ConnectionGetStatus,
    ConnectionGetStatusResponse,
    ConnectionStatusEvent,
    GapAddressType,
    GapConnectDirect,
    GapConnectDirectResponse,
    GapDiscover,
    GapDiscoverMode,
    GapDiscoverResponse,
    GapEndProcedure,
    GapEndProcedureResponse,
    GapScanResponseEvent,
)
from .reader import ResponseReader

logger = logging.getLogger(__name__)

# Link parameters for direct connections
CONNECTION_INTERVAL_MIN = 6  # x 1.25 ms
CONNECTION_INTERVAL_MAX = 6  # x 1.25 ms
SUPERVISION_TIMEOUT = 64  # x 10 ms
SLAVE_LATENCY = 0

# (rssi, address, advertising data) -> keep scanning?
DeviceCallback = Callable[[int, Address, bytes], bool]


class ConnectionManager:
    """Owns the active connection slot and connection state.

    Example:
        >>> manager = ConnectionManager(reader)
        >>> manager.connect("00:07:80:2d:9e:f1")
        >>> manager.connected
        True
        >>> manager.disconnect_all()
    """

    def __init__(self, reader: ResponseReader):
        self._reader = reader
        self._state: ConnectionState = Disconnected()
        # Slot attribute operations target; outlives the connection itself
        self._slot = 0

    # --- Accessors ---

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def connected(self) -> bool:
        return isinstance(self._state, Connected)

    @property
    def address(self) -> Address:
        """Address of the connected peer.

        Raises:
            StateError: If there is no active connection
        """
        if not isinstance(self._state, Connected):
            raise StateError("Connection is not established, no address available.")
        return self._state.address

    @property
    def slot(self) -> int:
        """Slot used for attribute operations."""
        return self._slot

    # --- Discovery ---

    def discover(self, on_device: DeviceCallback) -> None:
        """Scan for advertising devices.

        Every scan response is handed to ``on_device(rssi, address, data)``.
        Scanning stops as soon as the callback returns a falsy value; the
        scan procedure is then ended on the dongle before returning, also
        when the callback or the dongle raised. Other messages seen while
        scanning are dropped.

        Args:
            on_device: Callback deciding whether to keep scanning

        Raises:
            CommandError: If the dongle refuses to start scanning
        """
        transport = self._reader.transport
        transport.write(GapDiscover(mode=GapDiscoverMode.GENERIC))
        logger.info("Discovery started")

        try:
            running = True
            while running:
                received = transport.read()
                if isinstance(received, GapScanResponseEvent):
                    address = Address.from_wire(received.sender)
                    running = bool(on_device(received.rssi, address, received.data))
                elif isinstance(received, GapDiscoverResponse):
                    if received.result:
                        raise CommandError(
                            f"GapDiscover failed with result 0x{received.result:04x}",
                            result=received.result,
                        )
                else:
                    logger.debug(f"Ignoring {type(received).__name__} during discovery")
        finally:
            self._end_procedure()
            logger.info("Discovery ended")

    # --- Connect / disconnect ---

    def connect(self, address: Union[Address, str]) -> None:
        """Connect to a device, reusing a live connection if the dongle has one.

        A connection the dongle kept alive from a previous session is adopted
        instead of opening a new one. That only works if no attribute traffic
        happened on it before the previous session ended; otherwise the peer
        drops it shortly after. Disconnecting before exit avoids the issue.

        Args:
            address: Address object or ``aa:bb:cc:dd:ee:ff`` text

        Raises:
            FormatError: If the address text is malformed
            CommandError: If the dongle refuses the connection
        """
        if isinstance(address, str):
            address = parse_address(address)

        slot = self._find_live_slot(address)
        if slot is not None:
            self._adopt(slot, address)
            logger.info(f"Revived connection to {address} on slot {slot}")
            return

        transport = self._reader.transport
        transport.write(GapConnectDirect(
            address=address.value,
            addr_type=GapAddressType.PUBLIC,
            conn_interval_min=CONNECTION_INTERVAL_MIN,
            conn_interval_max=CONNECTION_INTERVAL_MAX,
            timeout=SUPERVISION_TIMEOUT,
            latency=SLAVE_LATENCY,
        ))
        response = self._reader.expect_success(GapConnectDirectResponse)
        slot = response.connection_handle

        status = self._reader.expect(ConnectionStatusEvent)
        if status.connection != slot:
            logger.warning(f"Status event for slot {status.connection}, expected slot {slot}")

        self._adopt(slot, address)
        logger.info(f"Connected to {address} on slot {slot}")

    def disconnect(self, slot: Optional[int] = None) -> None:
        """Close the connection on ``slot``.

        Disconnecting an idle slot is harmless; the dongle just acknowledges.
        If ``slot`` is the active connection, also waits for the link to go
        down and marks the manager disconnected.

        Args:
            slot: Slot to disconnect, or None for the active connection

        Raises:
            StateError: If ``slot`` is None and there is no active connection
        """
        if slot is None:
            if not isinstance(self._state, Connected):
                raise StateError("No active connection to disconnect.")
            slot = self._state.slot

        self._reader.transport.write(ConnectionDisconnect(connection=slot))
        self._reader.expect_tolerant(ConnectionDisconnectResponse)

        if isinstance(self._state, Connected) and self._state.slot == slot:
            event = self._reader.expect(ConnectionDisconnectedEvent)
            logger.info(f"Disconnected from {self._state.address} (reason 0x{event.reason:04x})")
            self._state = Disconnected()

    def disconnect_all(self) -> None:
        """Disconnect every slot, whatever its state."""
        for slot in CONNECTION_SLOTS:
            self.disconnect(slot)

    # Internal methods

    def _end_procedure(self) -> None:
        """Stop scanning and wait for the acknowledgment.

        Scan responses already in flight keep arriving until the dongle
        handles the command; they are dropped.
        """
        transport = self._reader.transport
        transport.write(GapEndProcedure())
        while True:
            received = transport.read()
            if isinstance(received, GapEndProcedureResponse):
                break
            logger.debug(f"Ignoring {type(received).__name__} while ending discovery")

        if received.result:
            logger.warning(f"GapEndProcedure returned result 0x{received.result:04x}")

    def _find_live_slot(self, address: Address) -> Optional[int]:
        """Return the slot already connected to ``address``, if any."""
        for slot in CONNECTION_SLOTS:
            self._reader.transport.write(ConnectionGetStatus(connection=slot))
            self._reader.expect(ConnectionGetStatusResponse)
            status = self._reader.expect(ConnectionStatusEvent)

            if status.is_connected and status.address == address.value:
                return slot
        return None

    def _adopt(self, slot: int, address: Address) -> None:
        self._slot = slot
        self._state = Connected(slot=slot, address=address)
