"""Serial transport for BGAPI dongles.

The dongle is a USB CDC device that:
- Connects to the PC via USB (VID=0x2458, PID=0x0001 for the BLED112)
- Runs the Bluetooth stack itself
- Exchanges BGAPI frames with the host over a virtual serial port

This module handles:
- Opening and closing the serial port (with auto-detection)
- Frame boundaries: one ``read`` returns exactly one decoded message
- Turning pyserial failures into TransportError
"""
from __future__ import annotations

import logging
from typing import Optional

import serial

from ..dongle_finder import DongleNotFoundError, find_single_dongle
from ..errors import TransportError, TransportTimeoutError
from ..protocol import BGAPIProtocol, Protocol
from ..protocol.messages import Message
from .base import Received, Transport

logger = logging.getLogger(__name__)

BLED112_VID = 0x2458
BLED112_PID = 0x0001

DEFAULT_BAUDRATE = 115_200  # ignored by USB CDC, required by pyserial
DEFAULT_TIMEOUT = None  # block until a full frame arrives


class SerialTransport(Transport):
    """Transport over the dongle's USB CDC serial port.

    Responsibilities:
    - Open/close the serial port
    - Serialize commands via the protocol layer and write them
    - Read exactly one frame per ``receive`` and decode it

    Example:
        >>> with SerialTransport(port="/dev/ttyACM0") as transport:
        ...     transport.write(GapDiscover(mode=GapDiscoverMode.GENERIC))
        ...     transport.read(GapDiscoverResponse)
        GapDiscoverResponse(result=0)
    """

    def __init__(self,
                 port: Optional[str] = None,
                 baudrate: int = DEFAULT_BAUDRATE,
                 timeout: Optional[float] = DEFAULT_TIMEOUT,
                 protocol: Optional[Protocol] = None):
        """Initialize serial transport.

        Args:
            port: Serial port path (e.g., '/dev/ttyACM0'), or None to auto-detect
            baudrate: Serial baud rate
            timeout: Seconds to wait for a frame, or None to block forever
            protocol: Wire protocol (default: BGAPIProtocol)
        """
        self._port = port
        self._baudrate = baudrate
        self._timeout = timeout
        self._protocol = protocol or BGAPIProtocol()

        self._serial: Optional[serial.Serial] = None

    @property
    def port(self) -> Optional[str]:
        return self._port

    def open(self) -> bool:
        """Open the serial port.

        If port is None, attempts to auto-detect the dongle by VID/PID.

        Returns:
            True if the port is open, False otherwise
        """
        if self.is_open():
            logger.warning("Already open")
            return True

        if self._port is None:
            try:
                info = find_single_dongle(
                    expected_vid=BLED112_VID,
                    expected_pid=BLED112_PID,
                )
                self._port = info.port
                logger.info(f"Auto-detected dongle on {self._port}")
            except DongleNotFoundError as e:
                logger.error(f"Dongle not found: {e}")
                return False
            except RuntimeError as e:
                logger.error(f"Error finding dongle: {e}")
                return False

        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=self._baudrate,
                timeout=self._timeout,
            )

            # Drop anything left over from a previous session
            self._serial.reset_input_buffer()
            self._serial.reset_output_buffer()

            logger.info(f"Opened dongle on {self._port}")

        except serial.SerialException as e:
            logger.error(f"Failed to open {self._port}: {e}")
            self._serial = None
            return False

        return True

    def close(self) -> None:
        """Close the serial port."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except serial.SerialException as e:
            logger.error(f"Error closing serial port: {e}")
        finally:
            self._serial = None

        logger.info("Closed dongle port")

    def is_open(self) -> bool:
        return self._serial is not None

    def write(self, command: Message, payload: bytes = b"") -> None:
        """Serialize and send one command."""
        frame = self._protocol.serialize_command(command, payload)
        port = self._require_open()

        logger.debug(f"-> {command} payload={bytes(payload).hex()}")
        try:
            port.write(frame)
            port.flush()
        except serial.SerialException as e:
            logger.error(f"Send error: {e}")
            raise TransportError(f"Failed to write {type(command).__name__}: {e}") from e

    def receive(self) -> Received:
        """Read one frame and decode it."""
        header = self._read_exact(self._protocol.header_length)
        payload = self._read_exact(self._protocol.payload_length(header))

        message = self._protocol.parse_frame(header + payload)
        logger.debug(f"<- {message}")
        return message

    # Internal methods

    def _require_open(self) -> serial.Serial:
        if self._serial is None:
            raise TransportError("Serial port is not open")
        return self._serial

    def _read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes or fail."""
        if size == 0:
            return b""

        port = self._require_open()
        try:
            data = port.read(size)
        except serial.SerialException as e:
            logger.error(f"Serial read error: {e}")
            raise TransportError(f"Serial read failed: {e}") from e

        if len(data) < size:
            raise TransportTimeoutError(
                f"Timed out after {self._timeout}s waiting for {size} bytes "
                f"({len(data)} received)"
            )
        return bytes(data)
