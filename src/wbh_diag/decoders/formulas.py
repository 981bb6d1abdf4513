"""
Measuring value formulas.

Every measurement record names a formula id and carries two raw bytes,
``a`` and ``b``. The formula turns them into a physical value and unit.
Ids 0 and 37 have no formula and, like ids past the end of the table,
decode to an unknown unit with value 0.
"""

from typing import Callable, Dict, Tuple

from ..models.measurement import Measurement, MeasurementUnit as Unit

Formula = Callable[[int, int], Tuple[float, Unit]]

FORMULA_COUNT = 71
UNUSED_FORMULAS = frozenset({0, 37})


def _product(coefficient: float, unit: Unit) -> Formula:
    """Formula of the form coefficient * a * b."""
    def formula(a: int, b: int) -> Tuple[float, Unit]:
        return coefficient * a * b, unit
    return formula


def _word(a: int, b: int) -> int:
    return a * 256 + b


def _ignition(a: int, b: int, center: int) -> Tuple[float, Unit]:
    """Ignition angle relative to top dead center."""
    return abs(b - center) * 0.01 * a, Unit.ATDC if b > center else Unit.BTDC


def _ratio(a: int, b: int) -> Tuple[float, Unit]:
    if a == 0:
        return 100.0 * b, Unit.PERCENT
    return (100.0 * b) / a, Unit.PERCENT


def _pressure_delta(a: int, b: int) -> Tuple[float, Unit]:
    if a == 0:
        return float(b - 128), Unit.MBAR
    return (b - 128) / (0.01 * a), Unit.MBAR


def _signed_quotient(a: int, b: int) -> Tuple[float, Unit]:
    if a == 0:
        return float(b - 128), Unit.NONE
    return (b - 128) / a, Unit.NONE


FORMULAS: Dict[int, Formula] = {
    1: _product(0.2, Unit.RPM),
    2: _product(0.002, Unit.PERCENT),
    3: _product(0.002, Unit.DEGREES),
    4: lambda a, b: _ignition(a, b, 127),
    5: lambda a, b: (a * (b - 100) * 0.1, Unit.CELSIUS),
    6: _product(0.001, Unit.VOLT),
    7: _product(0.01, Unit.KMH),
    8: _product(0.1, Unit.NONE),
    9: lambda a, b: ((b - 127) * 0.02 * a, Unit.DEGREES),
    10: lambda a, b: (float(b), Unit.WARM if b else Unit.COLD),
    11: lambda a, b: (0.0001 * a * (b - 128) + 1, Unit.NONE),
    12: _product(0.001, Unit.OHM),
    13: lambda a, b: ((b - 127) * 0.001 * a, Unit.MM),
    14: _product(0.005, Unit.BAR),
    15: _product(0.01, Unit.MS),
    16: lambda a, b: (float(_word(a, b)), Unit.BITS),
    17: lambda a, b: (float(_word(a, b)), Unit.TEXT),
    18: _product(0.04, Unit.MBAR),
    19: _product(0.01, Unit.LITER),
    20: lambda a, b: (a * (b - 128) / 128, Unit.PERCENT),
    21: _product(0.001, Unit.VOLT),
    22: _product(0.001, Unit.MS),
    23: lambda a, b: (b / 256 * a, Unit.PERCENT),
    24: _product(0.001, Unit.AMPERE),
    25: lambda a, b: ((b * 1.421) + (a / 182), Unit.GRAMS_PER_SECOND),
    26: lambda a, b: (float(b - a), Unit.CELSIUS),
    27: lambda a, b: _ignition(a, b, 128),
    28: lambda a, b: (float(b - a), Unit.NONE),
    29: lambda a, b: (1.0 if b < a else 2.0, Unit.MAP),
    30: lambda a, b: (b / 12 * a, Unit.DEG_KW),
    31: lambda a, b: (b / 2560 * a, Unit.CELSIUS),
    32: lambda a, b: (float(b - 256 if b > 128 else b), Unit.NONE),
    33: _ratio,
    34: lambda a, b: ((b - 128) * 0.01 * a, Unit.KW),
    35: _product(0.01, Unit.LITER_PER_HOUR),
    36: lambda a, b: (float(a * 2560 + b * 10), Unit.KM),
    38: lambda a, b: ((b - 128) * 0.001 * a, Unit.DEG_KW),
    39: lambda a, b: (b / 256 * a, Unit.MG_PER_HOUR),
    40: lambda a, b: (b * 0.1 + (25.5 * a) - 400, Unit.AMPERE),
    41: lambda a, b: (float(b + a * 255), Unit.AMPERE_HOUR),
    42: lambda a, b: (b * 0.1 + (25.5 * a) - 400, Unit.KW),
    43: lambda a, b: (b * 0.1 + (25.5 * a), Unit.VOLT),
    44: lambda a, b: (float(a * 60 + b), Unit.MINUTES),
    45: lambda a, b: (0.1 * a * b / 100, Unit.NONE),
    46: lambda a, b: ((a * b - 3200) * 0.0027, Unit.DEG_KW),
    47: lambda a, b: (float((b - 128) * a), Unit.MS),
    48: lambda a, b: (float(b + a * 255), Unit.NONE),
    49: lambda a, b: ((b / 4) * a * 0.1, Unit.MG_PER_HOUR),
    50: _pressure_delta,
    51: lambda a, b: (((b - 128) / 255) * a, Unit.MG_PER_HOUR),
    52: lambda a, b: (b * 0.02 * a - a, Unit.NM),
    53: lambda a, b: ((b - 128) * 1.4222 + 0.006 * a, Unit.GRAMS_PER_SECOND),
    54: lambda a, b: (float(_word(a, b)), Unit.COUNT),
    55: lambda a, b: (a * b / 200, Unit.SECONDS),
    56: lambda a, b: (float(_word(a, b)), Unit.WSC),
    57: lambda a, b: (float(_word(a, b) + 65536), Unit.WSC),
    58: lambda a, b: (1.0225 * (256 - b) if b > 128 else 1.0225 * b, Unit.PER_SECOND),
    59: lambda a, b: (_word(a, b) / 32768, Unit.PERCENT),
    60: lambda a, b: (_word(a, b) * 0.01, Unit.SECONDS),
    61: _signed_quotient,
    62: _product(0.256, Unit.SECONDS),
    63: lambda a, b: (float(_word(a, b)), Unit.TEXT),
    64: lambda a, b: (float(a + b), Unit.OHM),
    65: lambda a, b: (0.01 * a * (b - 127), Unit.MM),
    66: lambda a, b: ((a * b) / 511.12, Unit.VOLT),
    67: lambda a, b: ((640 * a) + b * 2.5, Unit.DEGREES),
    68: lambda a, b: ((256 * a + b) / 7.365, Unit.DEG_PER_S),
    69: lambda a, b: ((256 * a + b) * 0.3254, Unit.BAR),
    70: lambda a, b: ((256 * a + b) * 0.192, Unit.M_PER_S2),
}


def apply_formula(formula_id: int, a: int, b: int) -> Measurement:
    """
    Decode one raw measurement triple.

    Unknown and unused formula ids yield value 0 with an UNKNOWN unit; the
    raw bytes are kept either way.
    """
    formula = FORMULAS.get(formula_id)
    if formula is None:
        return Measurement(formula_id=formula_id, byte_a=a, byte_b=b)

    value, unit = formula(a, b)
    return Measurement(formula_id=formula_id, byte_a=a, byte_b=b, value=float(value), unit=unit)


def is_known_formula(formula_id: int) -> bool:
    """Check if a formula id has a decoding rule."""
    return formula_id in FORMULAS
