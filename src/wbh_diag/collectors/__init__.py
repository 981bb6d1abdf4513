"""ECU queries built on a device connection."""

from .base import BaseCollector
from .actuator import ActuatorDiagnosis
from .dtc import DTCCollector
from .measurement import MeasurementCollector
from .scanner import DeviceScanner

__all__ = [
    "BaseCollector",
    "ActuatorDiagnosis",
    "DTCCollector",
    "MeasurementCollector",
    "DeviceScanner",
]
