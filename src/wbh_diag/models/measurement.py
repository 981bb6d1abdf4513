"""Data models for measurement group values."""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field


class MeasurementUnit(str, Enum):
    """Physical units reported by measurement formulas."""
    # Engine
    RPM = "/min"
    PERCENT = "%"
    DEGREES = "deg"
    ATDC = "deg ATDC"
    BTDC = "deg BTDC"
    DEG_KW = "deg k/w"
    DEG_PER_S = "deg/s"

    # Temperature
    CELSIUS = "°C"
    WARM = "warm"
    COLD = "cold"

    # Electrical
    VOLT = "V"
    AMPERE = "A"
    AMPERE_HOUR = "Ah"
    OHM = "Ω"

    # Motion and distance
    KMH = "km/h"
    KM = "km"
    MM = "mm"
    M_PER_S2 = "m/s²"

    # Pressure
    BAR = "bar"
    MBAR = "mbar"

    # Time
    MS = "ms"
    SECONDS = "s"
    MINUTES = "min"
    PER_SECOND = "/s"

    # Flow and volume
    LITER = "l"
    LITER_PER_HOUR = "l/h"
    GRAMS_PER_SECOND = "g/s"
    MG_PER_HOUR = "mg/h"

    # Power and torque
    KW = "kW"
    NM = "Nm"

    # Coded values
    BITS = "bits"
    TEXT = "text"
    MAP = "map"
    COUNT = "count"
    WSC = "WSC"

    # Generic
    NONE = ""
    UNKNOWN = "?"

    @property
    def label(self) -> str:
        """Human-readable label."""
        return UNIT_LABELS[self]


UNIT_LABELS = {
    MeasurementUnit.RPM: "RPM",
    MeasurementUnit.PERCENT: "percent",
    MeasurementUnit.DEGREES: "degrees",
    MeasurementUnit.ATDC: "degrees ATDC",
    MeasurementUnit.BTDC: "degrees BTDC",
    MeasurementUnit.DEG_KW: "degrees crankshaft",
    MeasurementUnit.DEG_PER_S: "degrees per second",
    MeasurementUnit.CELSIUS: "degrees Celsius",
    MeasurementUnit.WARM: "warm",
    MeasurementUnit.COLD: "cold",
    MeasurementUnit.VOLT: "volt",
    MeasurementUnit.AMPERE: "ampere",
    MeasurementUnit.AMPERE_HOUR: "ampere hours",
    MeasurementUnit.OHM: "ohm",
    MeasurementUnit.KMH: "km/h",
    MeasurementUnit.KM: "kilometers",
    MeasurementUnit.MM: "millimeters",
    MeasurementUnit.M_PER_S2: "m/s^2",
    MeasurementUnit.BAR: "bar",
    MeasurementUnit.MBAR: "millibar",
    MeasurementUnit.MS: "milliseconds",
    MeasurementUnit.SECONDS: "seconds",
    MeasurementUnit.MINUTES: "minutes",
    MeasurementUnit.PER_SECOND: "per second",
    MeasurementUnit.LITER: "liters",
    MeasurementUnit.LITER_PER_HOUR: "liters per hour",
    MeasurementUnit.GRAMS_PER_SECOND: "grams per second",
    MeasurementUnit.MG_PER_HOUR: "mg per hour",
    MeasurementUnit.KW: "kilowatt",
    MeasurementUnit.NM: "newton meters",
    MeasurementUnit.BITS: "bit pattern",
    MeasurementUnit.TEXT: "text",
    MeasurementUnit.MAP: "map",
    MeasurementUnit.COUNT: "count",
    MeasurementUnit.WSC: "workshop code",
    MeasurementUnit.NONE: "none",
    MeasurementUnit.UNKNOWN: "unknown",
}


class Measurement(BaseModel):
    """A decoded measurement value with the raw bytes it came from."""

    model_config = ConfigDict(frozen=True)

    formula_id: int = Field(..., ge=0, le=0xFF, description="Formula identifier")
    byte_a: int = Field(..., ge=0, le=0xFF, description="First raw byte")
    byte_b: int = Field(..., ge=0, le=0xFF, description="Second raw byte")
    value: float = Field(default=0.0, description="Decoded physical value")
    unit: MeasurementUnit = Field(default=MeasurementUnit.UNKNOWN, description="Physical unit")

    @property
    def raw(self) -> Tuple[int, int, int]:
        """The (formula_id, byte_a, byte_b) triple as received."""
        return (self.formula_id, self.byte_a, self.byte_b)

    @property
    def is_known(self) -> bool:
        """Whether the formula id mapped to a known formula."""
        return self.unit != MeasurementUnit.UNKNOWN

    @property
    def formatted_value(self) -> str:
        """Get formatted value with unit."""
        if self.unit == MeasurementUnit.TEXT:
            return f"{chr(self.byte_a)}{chr(self.byte_b)}"
        if self.unit == MeasurementUnit.BITS:
            return f"{self.byte_a:08b} {self.byte_b:08b}"
        if self.unit == MeasurementUnit.MINUTES:
            return f"{self.byte_a:02d}:{self.byte_b:02d}"
        if self.unit in (MeasurementUnit.WARM, MeasurementUnit.COLD):
            return self.unit.value
        return f"{self.value:.2f} {self.unit.value}".strip()

    def __str__(self) -> str:
        return self.formatted_value
