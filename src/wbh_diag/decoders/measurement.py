"""Measurement group decoder."""

import logging
import re
from typing import List

from .formulas import apply_formula, is_known_formula
from ..exceptions import UnsupportedFormatError
from ..models.measurement import Measurement

logger = logging.getLogger(__name__)


class MeasurementDecoder:
    """
    Decodes the response to command ``08<group>``.

    Each value is one line ``FF AA BB``: formula id and the two raw bytes,
    all as two hex digits. Records are nine characters including the line
    feed.
    """

    RECORD_SIZE = 9
    RECORD_PATTERN = re.compile(r"([0-9A-Fa-f]{2}) ([0-9A-Fa-f]{2}) ([0-9A-Fa-f]{2})\n")

    # Responses starting above this character use a layout we cannot read
    MAX_FORMAT_CHAR = "4"

    @classmethod
    def decode(cls, text: str) -> List[Measurement]:
        """
        Parse measurement records until the first one that does not match.

        Raises:
            UnsupportedFormatError: If the response format is not understood
        """
        if text and text[0] > cls.MAX_FORMAT_CHAR:
            raise UnsupportedFormatError(f"Unsupported measurement response format: {text[:16]!r}")

        values = []
        offset = 0

        while True:
            match = cls.RECORD_PATTERN.fullmatch(text, offset, offset + cls.RECORD_SIZE)
            if not match:
                break

            formula_id, a, b = (int(g, 16) for g in match.groups())
            if not is_known_formula(formula_id):
                logger.debug(f"No formula for id {formula_id}, raw bytes {a:02X} {b:02X}")

            values.append(apply_formula(formula_id, a, b))
            offset += cls.RECORD_SIZE

        return values
