"""Characteristic enumeration via the find information procedure."""
from __future__ import annotations

import logging

from ..errors import ProtocolError
from ..models import Characteristics
from ..protocol.messages import (
    AttclientAttributeValueEvent,
    AttclientFindInformation,
    AttclientFindInformationFoundEvent,
    AttclientFindInformationResponse,
    AttclientProcedureCompletedEvent,
)
from .connection import ConnectionManager
from .reader import ResponseReader

logger = logging.getLogger(__name__)

FIRST_HANDLE = 0x0001
LAST_HANDLE = 0xFFFF


class CharacteristicDirectory:
    """Maps characteristic UUIDs to attribute handles."""

    def __init__(self, reader: ResponseReader, connection: ConnectionManager):
        self._reader = reader
        self._connection = connection

    def discover_characteristics(self) -> Characteristics:
        """Enumerate every attribute of the connected peer.

        Returns:
            Fresh dict of UUID bytes (2 or 16 bytes, wire order) to handle.
            If a UUID shows up twice the later handle wins.

        Raises:
            ProtocolError: If a UUID's declared length does not match its bytes
            CommandError: If the dongle rejects the procedure
        """
        self._reader.transport.write(AttclientFindInformation(
            connection=self._connection.slot,
            start=FIRST_HANDLE,
            end=LAST_HANDLE,
        ))
        self._reader.expect_success(AttclientFindInformationResponse)

        found: Characteristics = {}
        while True:
            event = self._reader.transport.read(
                AttclientFindInformationFoundEvent,
                AttclientProcedureCompletedEvent,
                AttclientAttributeValueEvent,
            )
            if isinstance(event, AttclientProcedureCompletedEvent):
                break
            if isinstance(event, AttclientAttributeValueEvent):
                self._reader.events.push(event.atthandle, event.value)
                continue

            if event.length != len(event.uuid):
                raise ProtocolError(
                    f"UUID at handle 0x{event.chrhandle:04x} declares {event.length} bytes "
                    f"but {len(event.uuid)} arrived"
                )
            found[event.uuid] = event.chrhandle

        logger.info(f"Found {len(found)} attribute(s)")
        return found
