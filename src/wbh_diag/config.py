"""Runtime settings for the WBH-Diag driver."""

import os
from typing import Optional

from pydantic import BaseModel, Field


class WBHSettings(BaseModel):
    """Timeouts, buffer sizes and defaults used by the driver."""

    port: str = Field(default="/dev/rfcomm1", description="Serial device path")
    serial_baudrate: int = Field(default=9600, description="Host-side serial line speed")

    poll_interval: float = Field(default=1.0, gt=0, description="Timeout check granularity (s)")

    # Interface level (seconds)
    drain_timeout: int = Field(default=2, ge=0, description="Stale response drain at bring-up")
    ident_timeout: int = Field(default=120, ge=0, description="Wait for ATI response")
    ident_attempts: int = Field(default=5, ge=1, description="ATI attempts before giving up")
    reset_timeout: int = Field(default=10, ge=0)
    baud_timeout: int = Field(default=3, ge=0)
    analog_timeout: int = Field(default=3, ge=0)
    timing_timeout: int = Field(default=3, ge=0)

    # Device level (seconds)
    connect_timeout: int = Field(default=100, ge=0, description="ECU wake-up is slow")
    disconnect_timeout: int = Field(default=10, ge=0)
    command_timeout: int = Field(default=30, ge=0)
    dtc_timeout: int = Field(default=100, ge=0)
    measurement_timeout: int = Field(default=30, ge=0)
    actuator_timeout: int = Field(default=30, ge=0)

    # Response buffers (bytes)
    response_size: int = Field(default=255, gt=0)
    drain_size: int = Field(default=2048, gt=0)
    dtc_response_size: int = Field(default=2048, gt=0)

    @classmethod
    def from_env(cls, prefix: str = "WBH_", **overrides) -> "WBHSettings":
        """
        Build settings from environment variables.

        Every field can be overridden with an upper-case variable, e.g.
        ``WBH_PORT=/dev/ttyUSB0`` or ``WBH_CONNECT_TIMEOUT=60``. Explicit
        keyword overrides win over the environment.
        """
        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{prefix}{name.upper()}")
            if raw is not None:
                values[name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


_default_settings: Optional[WBHSettings] = None


def get_settings() -> WBHSettings:
    """Get or create the shared default settings."""
    global _default_settings
    if _default_settings is None:
        _default_settings = WBHSettings()
    return _default_settings
