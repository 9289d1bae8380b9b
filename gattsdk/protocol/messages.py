"""BGAPI message definitions.

Every message is a frozen dataclass whose fields follow the wire order.
Fixed size fields are described by a little-endian ``struct`` format.
A trailing ``uint8array`` is modelled as a declared ``length`` field (the
last fixed field) followed by the raw bytes that actually arrived, so a
mismatch between the two stays visible to the caller.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag
from typing import Dict, Optional, Tuple, Type


class MessageKind(Enum):
    """Direction and role of a BGAPI message."""
    COMMAND = "command"
    RESPONSE = "response"
    EVENT = "event"


class MessageClass(IntEnum):
    """BGAPI class identifiers used by the driver."""
    SYSTEM = 0
    CONNECTION = 3
    ATTCLIENT = 4
    GAP = 6


class GapDiscoverMode(IntEnum):
    LIMITED = 0
    GENERIC = 1
    OBSERVATION = 2


class GapAddressType(IntEnum):
    PUBLIC = 0
    RANDOM = 1


class ConnectionStatusFlags(IntFlag):
    CONNECTED = 0x01
    ENCRYPTED = 0x02
    COMPLETED = 0x04
    PARAMETERS_CHANGE = 0x08


class AttributeValueType(IntEnum):
    READ = 0
    NOTIFY = 1
    INDICATE = 2
    READ_BY_TYPE = 3
    READ_BLOB = 4
    INDICATE_RSP_REQ = 5


class Message:
    """Base class for all BGAPI messages.

    Subclasses are registered with :func:`message`, which attaches the wire
    identity (kind, class id, message id) and the field layout.
    """
    KIND: MessageKind
    CLASS_ID: int
    MESSAGE_ID: int
    FORMAT: str = "<"
    TRAILING: Optional[str] = None

    @classmethod
    def fixed_size(cls) -> int:
        return struct.calcsize(cls.FORMAT)

    @classmethod
    def key(cls) -> Tuple[int, int]:
        return (cls.CLASS_ID, cls.MESSAGE_ID)


COMMANDS: Dict[Tuple[int, int], Type[Message]] = {}
RESPONSES: Dict[Tuple[int, int], Type[Message]] = {}
EVENTS: Dict[Tuple[int, int], Type[Message]] = {}

_REGISTRIES = {
    MessageKind.COMMAND: COMMANDS,
    MessageKind.RESPONSE: RESPONSES,
    MessageKind.EVENT: EVENTS,
}


def message(kind: MessageKind, class_id: int, message_id: int,
            fmt: str = "", trailing: Optional[str] = None):
    """Class decorator: make ``cls`` a frozen dataclass and register it."""
    def wrap(cls):
        cls = dataclass(frozen=True)(cls)
        cls.KIND = kind
        cls.CLASS_ID = int(class_id)
        cls.MESSAGE_ID = message_id
        cls.FORMAT = "<" + fmt
        cls.TRAILING = trailing
        _REGISTRIES[kind][cls.key()] = cls
        return cls
    return wrap


@dataclass(frozen=True)
class UnknownMessage:
    """A well formed frame whose (class, id) the driver does not model."""
    kind: MessageKind
    class_id: int
    message_id: int
    payload: bytes


# --- Connection class ---

@message(MessageKind.COMMAND, MessageClass.CONNECTION, 0, "B")
class ConnectionDisconnect(Message):
    connection: int


@message(MessageKind.RESPONSE, MessageClass.CONNECTION, 0, "BH")
class ConnectionDisconnectResponse(Message):
    connection: int
    result: int


@message(MessageKind.COMMAND, MessageClass.CONNECTION, 7, "B")
class ConnectionGetStatus(Message):
    connection: int


@message(MessageKind.RESPONSE, MessageClass.CONNECTION, 7, "B")
class ConnectionGetStatusResponse(Message):
    connection: int


@message(MessageKind.EVENT, MessageClass.CONNECTION, 0, "BB6sBHHHB")
class ConnectionStatusEvent(Message):
    connection: int
    flags: int
    address: bytes
    address_type: int
    conn_interval: int
    timeout: int
    latency: int
    bonding: int

    @property
    def is_connected(self) -> bool:
        return bool(self.flags & ConnectionStatusFlags.CONNECTED)


@message(MessageKind.EVENT, MessageClass.CONNECTION, 4, "BH")
class ConnectionDisconnectedEvent(Message):
    connection: int
    reason: int


# --- Attribute client class ---

@message(MessageKind.COMMAND, MessageClass.ATTCLIENT, 3, "BHH")
class AttclientFindInformation(Message):
    connection: int
    start: int
    end: int


@message(MessageKind.RESPONSE, MessageClass.ATTCLIENT, 3, "BH")
class AttclientFindInformationResponse(Message):
    connection: int
    result: int


@message(MessageKind.COMMAND, MessageClass.ATTCLIENT, 4, "BH")
class AttclientReadByHandle(Message):
    connection: int
    chrhandle: int


@message(MessageKind.RESPONSE, MessageClass.ATTCLIENT, 4, "BH")
class AttclientReadByHandleResponse(Message):
    connection: int
    result: int


@message(MessageKind.COMMAND, MessageClass.ATTCLIENT, 5, "BHB")
class AttclientAttributeWrite(Message):
    """Attribute write; the value itself travels as the write payload."""
    connection: int
    atthandle: int
    length: int


@message(MessageKind.RESPONSE, MessageClass.ATTCLIENT, 5, "BH")
class AttclientAttributeWriteResponse(Message):
    connection: int
    result: int


@message(MessageKind.EVENT, MessageClass.ATTCLIENT, 1, "BHH")
class AttclientProcedureCompletedEvent(Message):
    connection: int
    result: int
    chrhandle: int


@message(MessageKind.EVENT, MessageClass.ATTCLIENT, 4, "BHB", trailing="uuid")
class AttclientFindInformationFoundEvent(Message):
    connection: int
    chrhandle: int
    length: int
    uuid: bytes


@message(MessageKind.EVENT, MessageClass.ATTCLIENT, 5, "BHBB", trailing="value")
class AttclientAttributeValueEvent(Message):
    connection: int
    atthandle: int
    type: int
    length: int
    value: bytes


# --- GAP class ---

@message(MessageKind.COMMAND, MessageClass.GAP, 2, "B")
class GapDiscover(Message):
    mode: int = GapDiscoverMode.GENERIC


@message(MessageKind.RESPONSE, MessageClass.GAP, 2, "H")
class GapDiscoverResponse(Message):
    result: int


@message(MessageKind.COMMAND, MessageClass.GAP, 3, "6sBHHHH")
class GapConnectDirect(Message):
    address: bytes
    addr_type: int
    conn_interval_min: int
    conn_interval_max: int
    timeout: int
    latency: int


@message(MessageKind.RESPONSE, MessageClass.GAP, 3, "HB")
class GapConnectDirectResponse(Message):
    result: int
    connection_handle: int


@message(MessageKind.COMMAND, MessageClass.GAP, 4)
class GapEndProcedure(Message):
    pass


@message(MessageKind.RESPONSE, MessageClass.GAP, 4, "H")
class GapEndProcedureResponse(Message):
    result: int


@message(MessageKind.EVENT, MessageClass.GAP, 0, "bB6sBBB", trailing="data")
class GapScanResponseEvent(Message):
    rssi: int
    packet_type: int
    sender: bytes
    address_type: int
    bond: int
    length: int
    data: bytes
