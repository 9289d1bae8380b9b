"""GATT layer on top of a BGAPI transport.

This module provides:
- Connection management with slot revival (ConnectionManager)
- Attribute reads and writes (AttributeClient)
- Characteristic enumeration (CharacteristicDirectory)
- Ordered delivery of notifications (EventBuffer, NotificationListener)
- A facade tying them together (GattClient)
"""

from .events import EventBuffer
from .reader import ResponseReader
from .connection import ConnectionManager
from .attributes import AttributeClient
from .characteristics import CharacteristicDirectory
from .notifications import NotificationListener
from .client import GattClient

__all__ = [
    'EventBuffer',
    'ResponseReader',
    'ConnectionManager',
    'AttributeClient',
    'CharacteristicDirectory',
    'NotificationListener',
    'GattClient',
]
