"""Unit tests for the Transport abstraction and ScriptedTransport."""

import unittest

from gattsdk.errors import TransportError, UnexpectedMessageError
from gattsdk.protocol.messages import (
    AttclientAttributeValueEvent,
    ConnectionGetStatus,
    GapDiscover,
    GapDiscoverResponse,
    GapEndProcedureResponse,
)
from gattsdk.transport.base import Transport
from gattsdk.transport.scripted import ScriptedTransport


class TestTransportABC(unittest.TestCase):

    def test_is_abstract(self):
        with self.assertRaises(TypeError):
            Transport()

    def test_minimal_implementation(self):
        """Implementing the abstract methods is enough to get read()."""

        class OneShot(Transport):
            def open(self):
                return True

            def close(self):
                pass

            def is_open(self):
                return True

            def write(self, command, payload=b""):
                pass

            def receive(self):
                return GapDiscoverResponse(result=0)

        self.assertEqual(OneShot().read(GapDiscoverResponse), GapDiscoverResponse(result=0))


class TestScriptedTransport(unittest.TestCase):

    def test_replays_messages_in_order(self):
        transport = ScriptedTransport([
            GapDiscoverResponse(result=0),
            GapEndProcedureResponse(result=0),
        ])

        self.assertEqual(transport.read(), GapDiscoverResponse(result=0))
        self.assertEqual(transport.read(), GapEndProcedureResponse(result=0))
        self.assertEqual(transport.pending, 0)

    def test_decodes_frames(self):
        transport = ScriptedTransport([b"\x80\x07\x04\x05\x00\x2a\x00\x01\x02\x01\x02"])

        event = transport.read(AttclientAttributeValueEvent)

        self.assertEqual(event.atthandle, 0x002A)
        self.assertEqual(event.value, b"\x01\x02")

    def test_records_writes(self):
        transport = ScriptedTransport()
        transport.write(GapDiscover(mode=1))
        transport.write(ConnectionGetStatus(connection=2))

        self.assertEqual(transport.written, [
            (GapDiscover(mode=1), b""),
            (ConnectionGetStatus(connection=2), b""),
        ])
        self.assertEqual(transport.commands(), [GapDiscover(mode=1), ConnectionGetStatus(connection=2)])

    def test_rejects_unencodable_command(self):
        transport = ScriptedTransport()
        with self.assertRaises(ValueError):
            transport.write(ConnectionGetStatus(connection=999))
        self.assertEqual(transport.written, [])

    def test_exhausted(self):
        with self.assertRaises(TransportError):
            ScriptedTransport().read()

    def test_unexpected(self):
        transport = ScriptedTransport([GapDiscoverResponse(result=0)])
        with self.assertRaises(UnexpectedMessageError):
            transport.read(AttclientAttributeValueEvent)

    def test_closed(self):
        transport = ScriptedTransport([GapDiscoverResponse(result=0)])
        with transport:
            pass
        self.assertFalse(transport.is_open())
        with self.assertRaises(TransportError):
            transport.read()
        with self.assertRaises(TransportError):
            transport.write(GapDiscover(mode=1))


if __name__ == '__main__':
    unittest.main()
