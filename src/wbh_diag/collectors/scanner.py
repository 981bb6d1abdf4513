"""Scanning for responsive ECUs."""

import logging
from typing import Callable, Iterator, List, Optional

from ..connection.device import DeviceConnection
from ..connection.interface import WBHInterface
from ..exceptions import ConnectRejectedError, TransportTimeout, UnexpectedResponseError

logger = logging.getLogger(__name__)

# Answers meaning nothing usable lives at an address; anything else aborts the scan
UNREACHABLE_ERRORS = (ConnectRejectedError, UnexpectedResponseError, TransportTimeout)


def device_id_range(start: int, end: int) -> Iterator[int]:
    """
    Yield ids from ``start`` up to but excluding ``end``, wrapping at 256.

    Behaves like an 8-bit counter: ``end <= start`` wraps through 0xFF and
    ``start == end`` yields nothing.
    """
    device_id = start & 0xFF
    end &= 0xFF
    while device_id != end:
        yield device_id
        device_id = (device_id + 1) & 0xFF


class DeviceScanner:
    """Finds ECUs by trying to connect to each address in turn."""

    def __init__(self, interface: WBHInterface):
        self._interface = interface
        self._on_found: Optional[Callable[[int], None]] = None

    def on_found(self, callback: Callable[[int], None]) -> None:
        """Register callback invoked for every responsive id."""
        self._on_found = callback

    def scan(self, start: int = 0x01, end: int = 0x7F) -> List[int]:
        """
        Connect to and disconnect from every id in the range.

        Args:
            start: First id to try
            end: Id to stop before

        Returns:
            Ids that accepted a connection, in scan order

        Raises:
            SerialIOError: If the serial link itself fails
            InterfaceStateError: If the interface is not ready or a device
                is still connected
        """
        found = []
        logger.info(f"Scanning devices 0x{start & 0xFF:02X} to 0x{end & 0xFF:02X} on {self._interface.name}")

        for device_id in device_id_range(start, end):
            try:
                conn = DeviceConnection.connect(self._interface, device_id)
            except UNREACHABLE_ERRORS as e:
                logger.debug(f"Device 0x{device_id:02X} not reachable: {e}")
                continue

            found.append(device_id)
            logger.info(f"Device 0x{device_id:02X} reachable")
            if self._on_found:
                self._on_found(device_id)

            try:
                conn.disconnect()
            except UNREACHABLE_ERRORS as e:
                logger.warning(f"Disconnect from 0x{device_id:02X} failed during scan: {e}")

        return found
