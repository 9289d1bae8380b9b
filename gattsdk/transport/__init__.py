"""Transport layer for BGAPI dongle communication."""

from .base import Transport
from .serial import SerialTransport
from .scripted import ScriptedTransport

__all__ = ["Transport", "SerialTransport", "ScriptedTransport"]
