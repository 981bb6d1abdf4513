"""DTC (Diagnostic Trouble Code) collector."""

import logging
from typing import List

from .base import BaseCollector
from ..decoders.dtc import DTCDecoder
from ..models.dtc import DTCRecord

logger = logging.getLogger(__name__)

READ_DTC_COMMAND = "02"


class DTCCollector(BaseCollector):
    """Reads the fault memory of the connected ECU."""

    def collect(self) -> List[DTCRecord]:
        """
        Read all stored DTCs.

        Returns:
            Fault records in the order the ECU reported them
        """
        settings = self._device.interface.settings
        text = self._query(
            READ_DTC_COMMAND,
            timeout=settings.dtc_timeout,
            size=settings.dtc_response_size,
        )

        records = DTCDecoder.decode(text)
        logger.info(f"Read {len(records)} DTC(s) from device 0x{self._device.device_id:02X}")
        return records
