"""Event buffer for notifications that arrive out of turn.

When the driver waits for a particular response and an attribute value
event for some other handle shows up first, the event is parked here and
handed to the caller on the next ``listen``.
"""
from __future__ import annotations

import logging
from collections import deque
from typing import Iterator

from ..models import Notification

logger = logging.getLogger(__name__)


class EventBuffer:
    """FIFO holding area for deferred notifications.

    Events come out in the order they went in, each exactly once.
    Not thread-safe: the driver is single-threaded by contract.
    """

    def __init__(self):
        self._events: deque[Notification] = deque()

    def push(self, handle: int, data: bytes) -> None:
        """Append an event to the end of the buffer."""
        self._events.append(Notification(handle, bytes(data)))
        logger.debug(f"Buffered notification for handle 0x{handle:04x} ({len(self._events)} pending)")

    def drain(self) -> Iterator[Notification]:
        """Yield and remove events oldest first.

        Each event is removed before it is yielded, so an exception raised
        while handling one never causes it to be delivered again. Events
        pushed while draining are yielded too.
        """
        while self._events:
            yield self._events.popleft()

    def clear(self) -> None:
        self._events.clear()

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)
