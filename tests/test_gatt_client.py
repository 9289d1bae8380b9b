"""End-to-end tests for the GattClient facade over a scripted dongle."""

import unittest

from gattsdk import Address, GattClient, ScriptedTransport, StateError
from gattsdk.protocol import ProtocolSerializer
from gattsdk.protocol.messages import (
    AttclientAttributeValueEvent,
    AttclientAttributeWrite,
    AttclientAttributeWriteResponse,
    AttclientFindInformationFoundEvent,
    AttclientFindInformationResponse,
    AttclientProcedureCompletedEvent,
    AttclientReadByHandleResponse,
    ConnectionDisconnect,
    ConnectionDisconnectedEvent,
    ConnectionDisconnectResponse,
    ConnectionGetStatusResponse,
    ConnectionStatusEvent,
    GapConnectDirect,
    GapConnectDirectResponse,
    GapDiscoverResponse,
    GapEndProcedureResponse,
    GapScanResponseEvent,
)

PEER = Address.parse("00:07:80:2d:9e:f1")


def frame(message):
    return ProtocolSerializer.serialize_message(message)


def status(slot, flags=0, address=bytes(6)):
    return ConnectionStatusEvent(
        connection=slot, flags=flags, address=address, address_type=0,
        conn_interval=6, timeout=64, latency=0, bonding=0xFF,
    )


def value(handle, data, connection=2):
    return AttclientAttributeValueEvent(
        connection=connection, atthandle=handle, type=1, length=len(data), value=data,
    )


class TestGattClientSession(unittest.TestCase):
    """A whole session, fed as encoded frames like a real dongle sends them."""

    def setUp(self):
        self.transport = ScriptedTransport()
        self.client = GattClient(self.transport)

    def feed(self, *messages):
        self.transport.feed(*[frame(message) for message in messages])

    def connect_fresh(self):
        self.feed(
            ConnectionGetStatusResponse(connection=0), status(0),
            ConnectionGetStatusResponse(connection=1), status(1),
            ConnectionGetStatusResponse(connection=2), status(2),
            GapConnectDirectResponse(result=0, connection_handle=2),
            status(2, flags=5, address=PEER.value),
        )
        self.client.connect(str(PEER))

    def test_session(self):
        self.connect_fresh()
        self.assertTrue(self.client.connected)
        self.assertEqual(self.client.address, PEER)
        self.assertIsInstance(self.transport.commands()[-1], GapConnectDirect)

        self.feed(
            AttclientFindInformationResponse(connection=2, result=0),
            AttclientFindInformationFoundEvent(connection=2, chrhandle=0x0019, length=2, uuid=b"\x02\x29"),
            AttclientProcedureCompletedEvent(connection=2, result=0, chrhandle=0),
        )
        self.assertEqual(self.client.discover_characteristics(), {b"\x02\x29": 0x0019})

        self.feed(
            AttclientAttributeWriteResponse(connection=2, result=0),
            AttclientProcedureCompletedEvent(connection=2, result=0, chrhandle=0x0019),
        )
        self.client.write_attribute(0x0019, b"\x01\x00")
        self.assertEqual(
            self.transport.written[-1],
            (AttclientAttributeWrite(connection=2, atthandle=0x0019, length=2), b"\x01\x00"),
        )

        self.feed(
            AttclientReadByHandleResponse(connection=2, result=0),
            value(0x0030, b"\x10"),
            value(0x002A, b"\x01\x02"),
        )
        self.assertEqual(self.client.read_attribute(0x002A), b"\x01\x02")
        self.assertEqual(self.client.pending_notifications, 1)

        received = []
        self.feed(value(0x0030, b"\x11"))
        self.client.listen(lambda handle, data: received.append((handle, data)))
        self.assertEqual(received, [(0x0030, b"\x10"), (0x0030, b"\x11")])
        self.assertEqual(self.client.pending_notifications, 0)

        self.feed(
            ConnectionDisconnectResponse(connection=2, result=0),
            ConnectionDisconnectedEvent(connection=2, reason=0x0216),
        )
        self.client.disconnect()
        self.assertFalse(self.client.connected)
        with self.assertRaises(StateError):
            self.client.address

    def test_context_manager_disconnects_all_slots(self):
        self.connect_fresh()
        self.transport.written.clear()
        self.feed(
            ConnectionDisconnectResponse(connection=0, result=0x0186),
            ConnectionDisconnectResponse(connection=1, result=0x0186),
            ConnectionDisconnectResponse(connection=2, result=0),
            ConnectionDisconnectedEvent(connection=2, reason=0x0216),
        )

        with self.client:
            pass

        self.assertEqual(
            self.transport.commands(),
            [ConnectionDisconnect(connection=slot) for slot in range(3)],
        )
        self.assertFalse(self.client.connected)
        self.assertEqual(self.transport.pending, 0)

    def test_disconnect_slot(self):
        self.feed(ConnectionDisconnectResponse(connection=1, result=0))
        self.client.disconnect(1)
        self.assertEqual(self.transport.commands(), [ConnectionDisconnect(connection=1)])

    def test_discover(self):
        self.feed(
            GapDiscoverResponse(result=0),
            GapScanResponseEvent(
                rssi=-55, packet_type=0, sender=PEER.value, address_type=0,
                bond=0xFF, length=3, data=b"\x02\x01\x06",
            ),
            GapEndProcedureResponse(result=0),
        )
        seen = []

        self.client.discover(lambda rssi, address, data: seen.append(str(address)))

        self.assertEqual(seen, ["00:07:80:2d:9e:f1"])

    def test_state_starts_disconnected(self):
        self.assertFalse(self.client.connected)
        self.assertFalse(self.client.state.connected)


if __name__ == '__main__':
    unittest.main()
