"""Measurement group collector."""

import logging
from typing import List

from .base import BaseCollector
from ..decoders.measurement import MeasurementDecoder
from ..exceptions import InvalidArgumentError, UnsupportedFormatError
from ..models.measurement import Measurement

logger = logging.getLogger(__name__)


class MeasurementCollector(BaseCollector):
    """Reads measurement groups from the connected ECU."""

    def collect(self, group: int) -> List[Measurement]:
        """
        Read one measurement group.

        Args:
            group: Group number 0..255

        Returns:
            Decoded values in the order the ECU reported them

        Raises:
            UnsupportedFormatError: If the ECU answered in an unknown layout
        """
        if not 0 <= group <= 0xFF:
            raise InvalidArgumentError(f"Measurement group must be 0..255, got {group}")

        text = self._query(f"08{group:02X}", timeout=self._device.interface.settings.measurement_timeout)

        try:
            values = MeasurementDecoder.decode(text)
        except UnsupportedFormatError as e:
            self._device.interface.record_error(e)
            raise

        logger.debug(f"Group {group} of device 0x{self._device.device_id:02X}: {len(values)} value(s)")
        return values
