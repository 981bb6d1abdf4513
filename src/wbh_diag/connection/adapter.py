"""Serial port discovery for WBH-Diag interfaces."""

from typing import Optional, List
from dataclasses import dataclass
from enum import Enum

import serial.tools.list_ports


class PortType(str, Enum):
    """How the interface is attached."""
    USB_SERIAL = "USB serial"
    BLUETOOTH = "Bluetooth"
    UNKNOWN = "Unknown"


@dataclass
class PortInfo:
    """Information about a candidate serial port."""
    port: str
    description: str
    port_type: PortType
    hwid: str = ""
    manufacturer: str = ""
    vid: Optional[int] = None
    pid: Optional[int] = None

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        return f"{self.port_type.value} on {self.port}"

    def __str__(self) -> str:
        return self.display_name


class PortDetector:
    """Finds serial ports a WBH-Diag interface may be attached to."""

    # USB-to-serial bridges found on K-line interfaces
    KNOWN_USB_SERIAL_IDS = [
        (0x0403, 0x6001),  # FTDI FT232R
        (0x0403, 0x6015),  # FTDI FT231X
        (0x067B, 0x2303),  # Prolific PL2303
        (0x10C4, 0xEA60),  # Silicon Labs CP210x
        (0x1A86, 0x7523),  # CH340
    ]

    KLINE_KEYWORDS = [
        "wbh", "diag", "kkl", "k-line", "kline", "kw1281", "obd",
    ]

    BLUETOOTH_PATTERNS = [
        "bluetooth", "rfcomm", "bthenum", "bth",
    ]

    USB_SERIAL_KEYWORDS = [
        "usb", "serial", "uart", "ftdi", "prolific", "ch340",
        "cp210", "silicon labs", "converter",
    ]

    @classmethod
    def detect_all(cls) -> List[PortInfo]:
        """Detect all candidate ports, Bluetooth RFCOMM nodes first."""
        candidates = []
        for port in serial.tools.list_ports.comports():
            info = cls._analyze_port(port)
            if info:
                candidates.append(info)

        candidates.sort(key=lambda p: (p.port_type != PortType.BLUETOOTH, p.port))
        return candidates

    @classmethod
    def _analyze_port(cls, port) -> Optional[PortInfo]:
        """Classify one port from list_ports."""
        description = port.description or ""
        hwid = port.hwid or ""
        manufacturer = port.manufacturer or ""
        vid = getattr(port, "vid", None)
        pid = getattr(port, "pid", None)

        all_info = f"{port.device} {description} {hwid} {manufacturer}".lower()

        is_bluetooth = any(p in all_info for p in cls.BLUETOOTH_PATTERNS)
        is_known_usb = bool(vid and pid and (vid, pid) in cls.KNOWN_USB_SERIAL_IDS)
        looks_like_usb = any(kw in all_info for kw in cls.USB_SERIAL_KEYWORDS)
        has_kline_keyword = any(kw in all_info for kw in cls.KLINE_KEYWORDS)

        if is_bluetooth:
            port_type = PortType.BLUETOOTH
        elif is_known_usb or looks_like_usb or has_kline_keyword:
            port_type = PortType.USB_SERIAL
        else:
            return None

        return PortInfo(
            port=port.device,
            description=description,
            port_type=port_type,
            hwid=hwid,
            manufacturer=manufacturer,
            vid=vid,
            pid=pid,
        )
