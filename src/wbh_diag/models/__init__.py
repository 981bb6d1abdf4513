"""Data models for the WBH-Diag driver."""

from .device import BaudRate, Protocol, DeviceInfo
from .dtc import DTCRecord
from .measurement import Measurement, MeasurementUnit

__all__ = [
    "BaudRate",
    "Protocol",
    "DeviceInfo",
    "DTCRecord",
    "Measurement",
    "MeasurementUnit",
]
