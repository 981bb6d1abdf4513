"""Decoders for interpreting interface responses."""

from .dtc import DTCDecoder
from .formulas import FORMULAS, apply_formula
from .measurement import MeasurementDecoder

__all__ = ["DTCDecoder", "MeasurementDecoder", "FORMULAS", "apply_formula"]
