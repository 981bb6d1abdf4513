"""Base collector class for ECU queries."""

from abc import ABC, abstractmethod
from typing import Any, Optional, TYPE_CHECKING

from ..exceptions import WBHError, InterfaceStateError, check_response

if TYPE_CHECKING:
    from ..connection.device import DeviceConnection


class BaseCollector(ABC):
    """Abstract base class for queries that run over a device connection."""

    def __init__(self, device: "DeviceConnection"):
        """
        Initialize collector with a device connection.

        Args:
            device: The live ECU connection to query
        """
        self._device = device

    @property
    def device(self) -> "DeviceConnection":
        """Get the device connection."""
        return self._device

    @property
    def is_connected(self) -> bool:
        """Check if the device connection is live."""
        return self._device.is_connected

    def _ensure_connected(self) -> None:
        """Raise exception if not connected."""
        if not self.is_connected:
            raise InterfaceStateError(
                f"Device 0x{self._device.device_id:02X} is not connected. Please connect first."
            )

    def _query(self, command: str, timeout: float, size: Optional[int] = None) -> str:
        """Send a command and reject interface error replies."""
        self._ensure_connected()
        text = self._device.send_command(command, size=size, timeout=timeout)
        try:
            return check_response(text)
        except WBHError as e:
            self._device.interface.record_error(e)
            raise

    @abstractmethod
    def collect(self, *args, **kwargs) -> Any:
        """
        Collect data from the ECU.

        Returns:
            Collected data (type depends on collector implementation)
        """
        pass
