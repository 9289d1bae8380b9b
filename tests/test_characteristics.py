"""Unit tests for CharacteristicDirectory."""

import unittest

from gattsdk.errors import CommandError, ProtocolError
from gattsdk.gatt.characteristics import CharacteristicDirectory
from gattsdk.gatt.connection import ConnectionManager
from gattsdk.gatt.events import EventBuffer
from gattsdk.gatt.reader import ResponseReader
from gattsdk.models import Notification
from gattsdk.protocol.messages import (
    AttclientAttributeValueEvent,
    AttclientFindInformation,
    AttclientFindInformationFoundEvent,
    AttclientFindInformationResponse,
    AttclientProcedureCompletedEvent,
)
from gattsdk.transport.scripted import ScriptedTransport

PRIMARY_SERVICE = b"\x00\x28"
CHARACTERISTIC = b"\x03\x28"
CUSTOM = bytes(range(16))


def found(handle, uuid, length=None):
    return AttclientFindInformationFoundEvent(
        connection=0,
        chrhandle=handle,
        length=len(uuid) if length is None else length,
        uuid=uuid,
    )


def completed():
    return AttclientProcedureCompletedEvent(connection=0, result=0, chrhandle=0)


class TestDiscoverCharacteristics(unittest.TestCase):

    def setUp(self):
        self.transport = ScriptedTransport()
        self.events = EventBuffer()
        reader = ResponseReader(self.transport, self.events)
        self.directory = CharacteristicDirectory(reader, ConnectionManager(reader))

    def test_collects_until_completed(self):
        self.transport.feed(
            AttclientFindInformationResponse(connection=0, result=0),
            found(0x0001, PRIMARY_SERVICE),
            found(0x0002, CHARACTERISTIC),
            found(0x0003, CUSTOM),
            completed(),
        )

        result = self.directory.discover_characteristics()

        self.assertEqual(result, {
            PRIMARY_SERVICE: 0x0001,
            CHARACTERISTIC: 0x0002,
            CUSTOM: 0x0003,
        })
        self.assertEqual(
            self.transport.commands(),
            [AttclientFindInformation(connection=0, start=0x0001, end=0xFFFF)],
        )
        self.assertEqual(self.transport.pending, 0)

    def test_repeated_uuid_last_wins(self):
        self.transport.feed(
            AttclientFindInformationResponse(connection=0, result=0),
            found(0x0002, CHARACTERISTIC),
            found(0x0005, CHARACTERISTIC),
            completed(),
        )

        self.assertEqual(self.directory.discover_characteristics(), {CHARACTERISTIC: 0x0005})

    def test_empty_enumeration(self):
        self.transport.feed(
            AttclientFindInformationResponse(connection=0, result=0),
            completed(),
        )
        self.assertEqual(self.directory.discover_characteristics(), {})

    def test_uuid_length_mismatch(self):
        self.transport.feed(
            AttclientFindInformationResponse(connection=0, result=0),
            found(0x0003, CUSTOM[:15], length=16),
            completed(),
        )
        with self.assertRaises(ProtocolError):
            self.directory.discover_characteristics()

    def test_each_call_returns_fresh_mapping(self):
        for _ in range(2):
            self.transport.feed(
                AttclientFindInformationResponse(connection=0, result=0),
                found(0x0001, PRIMARY_SERVICE),
                completed(),
            )
        first = self.directory.discover_characteristics()
        first[b"x"] = 1
        second = self.directory.discover_characteristics()
        self.assertNotIn(b"x", second)

    def test_notifications_are_buffered(self):
        self.transport.feed(
            AttclientFindInformationResponse(connection=0, result=0),
            found(0x0001, PRIMARY_SERVICE),
            AttclientAttributeValueEvent(connection=0, atthandle=0x30, type=1, length=1, value=b"\x01"),
            completed(),
        )

        self.assertEqual(self.directory.discover_characteristics(), {PRIMARY_SERVICE: 1})
        self.assertEqual(list(self.events.drain()), [Notification(0x30, b"\x01")])

    def test_refused(self):
        self.transport.feed(AttclientFindInformationResponse(connection=0, result=0x0186))
        with self.assertRaises(CommandError):
            self.directory.discover_characteristics()


if __name__ == '__main__':
    unittest.main()
