"""Data models for the interface and connected ECUs."""

from enum import IntEnum
from typing import Optional

from pydantic import BaseModel, Field


class BaudRate(IntEnum):
    """Baud rate classes understood by ATN."""
    AUTO = 0
    BAUD_1200 = 1
    BAUD_2400 = 2
    BAUD_4800 = 3
    BAUD_9600 = 4
    BAUD_10400 = 5

    @property
    def bits_per_second(self) -> Optional[int]:
        """Line speed for this class, None for AUTO."""
        return _BAUD_SPEEDS.get(self)

    @classmethod
    def from_speed(cls, speed: int) -> "BaudRate":
        """Look up a class by its line speed (0 selects AUTO)."""
        if speed == 0:
            return cls.AUTO
        for rate, bps in _BAUD_SPEEDS.items():
            if bps == speed:
                return rate
        raise ValueError(f"No baud rate class for {speed} bps")


_BAUD_SPEEDS = {
    BaudRate.BAUD_1200: 1200,
    BaudRate.BAUD_2400: 2400,
    BaudRate.BAUD_4800: 4800,
    BaudRate.BAUD_9600: 9600,
    BaudRate.BAUD_10400: 10400,
}


class Protocol(IntEnum):
    """ECU wire protocols."""
    KW1281 = 1
    KW2000 = 2


class DeviceInfo(BaseModel):
    """What the interface told us about an ECU when connecting."""

    device_id: int = Field(..., ge=0, le=0xFF, description="ECU address")
    baud_rate: int = Field(..., description="Negotiated baud rate class digit")
    protocol_id: int = Field(..., description="Negotiated protocol digit")
    specs: str = Field(default="", description="Raw CONNECT response")

    @property
    def protocol(self) -> Optional[Protocol]:
        """Protocol enum member, None if the digit is not a known protocol."""
        try:
            return Protocol(self.protocol_id)
        except ValueError:
            return None

    @property
    def protocol_name(self) -> str:
        """Human-readable protocol name."""
        proto = self.protocol
        return proto.name if proto else f"Unknown ({self.protocol_id})"

    def __str__(self) -> str:
        return f"0x{self.device_id:02X} ({self.protocol_name})"
