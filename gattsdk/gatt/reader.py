"""Awaiting responses on a transport shared with unsolicited traffic."""
from __future__ import annotations

import logging
from typing import Type, TypeVar

from ..errors import CommandError
from ..protocol.messages import AttclientAttributeValueEvent, Message
from ..transport.base import Transport
from .events import EventBuffer

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Message)


class ResponseReader:
    """Reads the message a procedure is waiting for.

    Attribute value events may arrive at any point, ahead of the response
    being awaited. They are parked in the EventBuffer instead of being
    treated as errors, so none are lost.
    """

    def __init__(self, transport: Transport, events: EventBuffer):
        self.transport = transport
        self.events = events

    def expect(self, message_type: Type[M]) -> M:
        """Block until a ``message_type`` message arrives and return it.

        Raises:
            UnexpectedMessageError: If any other kind of message arrives
        """
        while True:
            received = self.transport.read(message_type, AttclientAttributeValueEvent)
            if isinstance(received, message_type):
                return received
            self.events.push(received.atthandle, received.value)

    def expect_success(self, message_type: Type[M]) -> M:
        """Like :meth:`expect`, but a non-zero ``result`` raises CommandError."""
        response = self.expect(message_type)
        result = getattr(response, "result", 0)
        if result:
            raise CommandError(
                f"{message_type.__name__} failed with result 0x{result:04x}",
                result=result,
            )
        return response

    def expect_tolerant(self, message_type: Type[M]) -> M:
        """Like :meth:`expect`, but a non-zero ``result`` is only logged."""
        response = self.expect(message_type)
        result = getattr(response, "result", 0)
        if result:
            logger.warning(f"{message_type.__name__} returned result 0x{result:04x}")
        return response
