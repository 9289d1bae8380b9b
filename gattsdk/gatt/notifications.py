"""Delivery of unsolicited attribute value events."""
from __future__ import annotations

from typing import Callable

from ..protocol.messages import AttclientAttributeValueEvent
from .reader import ResponseReader

# (handle, data)
NotificationCallback = Callable[[int, bytes], None]


class NotificationListener:
    """Hands notifications to the caller, buffered ones first."""

    def __init__(self, reader: ResponseReader):
        self._reader = reader

    def listen(self, on_notification: NotificationCallback) -> None:
        """Deliver buffered notifications, then wait for one new one.

        Notifications held back by earlier reads and writes are delivered
        oldest first, then exactly one live attribute value event is read
        and delivered. Call repeatedly to keep receiving.

        Args:
            on_notification: Called as ``on_notification(handle, data)``
        """
        for event in self._reader.events.drain():
            on_notification(event.handle, event.data)

        event = self._reader.transport.read(AttclientAttributeValueEvent)
        on_notification(event.atthandle, event.value)
