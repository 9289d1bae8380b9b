"""Scripted transport for tests and offline experiments.

Replays a fixed sequence of messages (or raw BGAPI frames) and records
every command written, so GATT procedures can be exercised without
hardware.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Iterable, List, Optional, Tuple, Union

from ..errors import TransportError
from ..protocol import BGAPIProtocol, Protocol
from ..protocol.messages import Message
from .base import Received, Transport

logger = logging.getLogger(__name__)

ScriptItem = Union[Message, bytes, bytearray]


class ScriptedTransport(Transport):
    """Transport that plays back a script.

    Script items are either decoded messages or encoded frames; frames are
    decoded with the protocol on the way out, exactly as a real transport
    would.

    Example:
        >>> transport = ScriptedTransport([GapDiscoverResponse(result=0)])
        >>> transport.write(GapDiscover())
        >>> transport.read(GapDiscoverResponse)
        GapDiscoverResponse(result=0)
        >>> transport.written
        [(GapDiscover(mode=<GapDiscoverMode.GENERIC: 1>), b'')]
    """

    def __init__(self,
                 script: Iterable[ScriptItem] = (),
                 protocol: Optional[Protocol] = None):
        self._script = deque(script)
        self._protocol = protocol or BGAPIProtocol()
        self._open = True
        self.written: List[Tuple[Message, bytes]] = []

    def feed(self, *items: ScriptItem) -> None:
        """Append more items to the end of the script."""
        self._script.extend(items)

    @property
    def pending(self) -> int:
        """Number of script items not yet read."""
        return len(self._script)

    def commands(self) -> List[Message]:
        """Commands written so far, without their payloads."""
        return [command for command, _ in self.written]

    def open(self) -> bool:
        self._open = True
        return True

    def close(self) -> None:
        self._open = False

    def is_open(self) -> bool:
        return self._open

    def write(self, command: Message, payload: bytes = b"") -> None:
        if not self._open:
            raise TransportError("Transport is closed")
        # Encode to catch commands the wire format cannot carry
        self._protocol.serialize_command(command, payload)
        self.written.append((command, bytes(payload)))

    def receive(self) -> Received:
        if not self._open:
            raise TransportError("Transport is closed")
        if not self._script:
            raise TransportError("Script exhausted")

        item = self._script.popleft()
        if isinstance(item, (bytes, bytearray)):
            item = self._protocol.parse_frame(bytes(item))
        logger.debug(f"<- {item}")
        return item
