"""DTC decoder for the interface's fault code listing."""

import logging
import re
from typing import List

from ..models.dtc import DTCRecord

logger = logging.getLogger(__name__)


class DTCDecoder:
    """
    Decodes the response to command ``02``.

    The interface lists one fault per line as ``XXXX XX``: four hex digits
    of error code, a space, two hex digits of status. Records are exactly
    eight characters including the line feed.
    """

    RECORD_SIZE = 8
    RECORD_PATTERN = re.compile(r"([0-9A-Fa-f]{4}) ([0-9A-Fa-f]{2})\n")

    @classmethod
    def decode(cls, text: str) -> List[DTCRecord]:
        """
        Parse fault records until the first one that does not match.

        Trailing data that is not a record ends the scan without error.
        """
        records = []
        offset = 0

        while True:
            match = cls.RECORD_PATTERN.fullmatch(text, offset, offset + cls.RECORD_SIZE)
            if not match:
                break
            records.append(DTCRecord(
                error_code=int(match.group(1), 16),
                status_code=int(match.group(2), 16),
            ))
            offset += cls.RECORD_SIZE

        if offset < len(text.rstrip("\n")):
            logger.debug(f"Stopped DTC scan at offset {offset}: {text[offset:offset + 16]!r}")

        return records
