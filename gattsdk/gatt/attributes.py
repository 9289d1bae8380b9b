"""Synchronous attribute reads and writes on the active connection."""
from __future__ import annotations

import logging

from ..errors import ProtocolError
from ..protocol.messages import (
    AttclientAttributeValueEvent,
    AttclientAttributeWrite,
    AttclientAttributeWriteResponse,
    AttclientProcedureCompletedEvent,
    AttclientReadByHandle,
    AttclientReadByHandleResponse,
)
from .connection import ConnectionManager
from .reader import ResponseReader

logger = logging.getLogger(__name__)

MAX_ATTRIBUTE_LENGTH = 0xFF  # single byte length field


class AttributeClient:
    """Reads and writes attribute values by handle.

    Both operations block until the peripheral has answered. Notifications
    for other handles that arrive in the meantime are parked in the event
    buffer for the next ``listen``.
    """

    def __init__(self, reader: ResponseReader, connection: ConnectionManager):
        self._reader = reader
        self._connection = connection

    def write_attribute(self, handle: int, payload: bytes) -> None:
        """Write ``payload`` to the attribute at ``handle``.

        Returns once the peripheral has confirmed the write.

        Raises:
            ValueError: If ``payload`` is longer than 255 bytes
            CommandError: If the dongle rejects the write
        """
        payload = bytes(payload)
        if len(payload) > MAX_ATTRIBUTE_LENGTH:
            raise ValueError(
                f"Attribute payload of {len(payload)} bytes exceeds {MAX_ATTRIBUTE_LENGTH}"
            )

        command = AttclientAttributeWrite(
            connection=self._connection.slot,
            atthandle=handle,
            length=len(payload),
        )
        self._reader.transport.write(command, payload)
        self._reader.expect_success(AttclientAttributeWriteResponse)
        self._reader.expect(AttclientProcedureCompletedEvent)
        logger.debug(f"Wrote {len(payload)} bytes to handle 0x{handle:04x}")

    def read_attribute(self, handle: int) -> bytes:
        """Read the value of the attribute at ``handle``.

        Value events for other handles that arrive before the answer are
        buffered in arrival order. There is no timeout here; a transport
        with a read timeout bounds the wait.

        Raises:
            ProtocolError: If the answer's declared length does not match
                the bytes received
            CommandError: If the dongle rejects the read
        """
        self._reader.transport.write(AttclientReadByHandle(
            connection=self._connection.slot,
            chrhandle=handle,
        ))
        self._reader.expect_success(AttclientReadByHandleResponse)

        while True:
            event = self._reader.expect(AttclientAttributeValueEvent)
            if event.atthandle == handle:
                break
            self._reader.events.push(event.atthandle, event.value)

        if event.length != len(event.value):
            raise ProtocolError(
                f"Handle 0x{handle:04x} declares {event.length} bytes "
                f"but {len(event.value)} arrived"
            )
        return event.value
