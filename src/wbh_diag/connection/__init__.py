"""Serial link, interface session and ECU connections."""

from .adapter import PortDetector, PortInfo
from .channel import ByteChannel
from .device import DeviceConnection
from .interface import InterfaceState, WBHInterface
from .transport import FramedTransport

__all__ = [
    "PortDetector",
    "PortInfo",
    "ByteChannel",
    "DeviceConnection",
    "InterfaceState",
    "WBHInterface",
    "FramedTransport",
]
