"""Actuator diagnosis."""

import logging
from typing import List

from .base import BaseCollector
from ..exceptions import UnexpectedResponseError
from ..connection.interface import parse_number

logger = logging.getLogger(__name__)

ACTUATOR_COMMAND = "03"


class ActuatorDiagnosis(BaseCollector):
    """
    Steps through the ECU's actuator test.

    Each step makes the ECU drive the next component and report its code.
    A reply of ``END`` means every component has been tested.
    """

    def step(self) -> int:
        """
        Advance to the next component.

        Returns:
            Component code, or 0 when there are no more components
        """
        text = self._query(ACTUATOR_COMMAND, timeout=self._device.interface.settings.actuator_timeout)

        if text.lstrip().startswith("END"):
            logger.info(f"Actuator diagnosis on device 0x{self._device.device_id:02X} complete")
            return 0

        try:
            code = parse_number(text, 16)
        except UnexpectedResponseError as e:
            self._device.interface.record_error(e)
            raise

        logger.debug(f"Actuator diagnosis component {code:04X}")
        return code

    def collect(self) -> List[int]:
        """Run the whole test and return the component codes in order."""
        codes = []
        while True:
            code = self.step()
            if code == 0:
                return codes
            codes.append(code)
