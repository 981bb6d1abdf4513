"""Session handling for one WBH-Diag interface."""

import functools
import logging
import threading
from enum import Enum
from typing import Callable, Optional, Union, TYPE_CHECKING

from .channel import ByteChannel
from .transport import FramedTransport, PROMPT
from ..config import WBHSettings, get_settings
from ..exceptions import (
    WBHError,
    InterfaceStateError,
    InvalidArgumentError,
    NoIdentificationError,
    TransportTimeout,
    UnexpectedResponseError,
    check_response,
)
from ..models.device import BaudRate

if TYPE_CHECKING:
    from .device import DeviceConnection

logger = logging.getLogger(__name__)

ANALOG_PINS = range(0, 6)


class InterfaceState(str, Enum):
    """Interface session state."""
    UNINITIALIZED = "uninitialized"
    IDENTIFYING = "identifying"
    READY = "ready"
    FAILED = "failed"
    CLOSED = "closed"


def decode_response(raw: bytes) -> str:
    """Turn a raw frame into text with one trailing prompt removed."""
    text = raw.decode("latin-1")
    prompt = PROMPT.decode("latin-1")
    if text.endswith(prompt):
        text = text[:-1]
    return text


def parse_number(text: str, base: int) -> int:
    """Parse the first non-empty line of a response as an integer."""
    for line in text.split("\n"):
        line = line.strip()
        if line:
            try:
                return int(line, base)
            except ValueError:
                break
    raise UnexpectedResponseError(f"Expected a base-{base} number, got {text!r}")


def records_errors(func):
    """Remember the description of any WBHError raised on this interface."""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except WBHError as e:
            self.record_error(e)
            raise
    return wrapper


def requires_ready(func):
    """Reject the call unless the handshake has completed."""
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if self._state != InterfaceState.READY:
            raise InterfaceStateError(
                f"Interface {self.name} is {self._state.value}, not ready"
            )
        return func(self, *args, **kwargs)
    return records_errors(wrapper)


class WBHInterface:
    """
    Host-side handle for one serial link to a WBH-Diag interface.

    The interface owns its byte channel. The link is half-duplex, so every
    request/response exchange runs under a lock and at most one ECU
    connection is live at a time.
    """

    IDENT_PREFIX = "WBH-Diag"

    def __init__(self, channel: ByteChannel, settings: Optional[WBHSettings] = None):
        self._settings = settings or get_settings()
        self._channel = channel
        self._transport = FramedTransport(channel, self._settings.poll_interval)
        self._lock = threading.RLock()

        self._state: InterfaceState = InterfaceState.UNINITIALIZED
        self._identification: str = ""
        self._last_error: Optional[str] = None
        self._device: Optional["DeviceConnection"] = None
        self._on_state_change: Optional[Callable[[InterfaceState], None]] = None

    @classmethod
    def open(
        cls,
        port: Optional[str] = None,
        settings: Optional[WBHSettings] = None,
        on_state_change: Optional[Callable[[InterfaceState], None]] = None,
    ) -> "WBHInterface":
        """
        Open the serial device and run the identification handshake.

        Args:
            port: Serial device path (defaults to settings.port)
            settings: Driver settings
            on_state_change: Callback for state changes during bring-up

        Returns:
            A ready interface

        Raises:
            OpenFailedError: If the device cannot be opened
            NoIdentificationError: If the interface never identified itself
        """
        settings = settings or get_settings()
        port = port or settings.port

        logger.info(f"Opening WBH-Diag interface on {port}")
        channel = ByteChannel.open(port, settings.serial_baudrate)
        iface = cls(channel, settings)
        if on_state_change:
            iface.on_state_change(on_state_change)

        try:
            iface.bring_up()
        except WBHError:
            channel.close()
            raise

        return iface

    @property
    def name(self) -> str:
        """Serial device path."""
        return self._channel.name

    @property
    def state(self) -> InterfaceState:
        """Get current session state."""
        return self._state

    @property
    def is_ready(self) -> bool:
        """Check if the interface can talk to ECUs."""
        return self._state == InterfaceState.READY

    @property
    def identification(self) -> str:
        """Identification text returned by ATI."""
        return self._identification

    @property
    def settings(self) -> WBHSettings:
        """Driver settings in use."""
        return self._settings

    @property
    def last_error(self) -> Optional[str]:
        """Description of the most recent failure on this interface."""
        return self._last_error

    @property
    def device(self) -> Optional["DeviceConnection"]:
        """The live ECU connection, if any."""
        return self._device

    def record_error(self, error: Exception) -> None:
        """Remember an error as this interface's last error."""
        self._last_error = str(error)

    def on_state_change(self, callback: Callable[[InterfaceState], None]) -> None:
        """Register callback for state changes."""
        self._on_state_change = callback

    def _set_state(self, state: InterfaceState) -> None:
        """Update state and notify callbacks."""
        self._state = state
        if self._on_state_change:
            try:
                self._on_state_change(state)
            except Exception as e:
                logger.warning(f"State change callback error: {e}")

    # ============ Lifecycle ============

    @records_errors
    def bring_up(self) -> str:
        """
        Identify the interface.

        Sends a bare CR and drains whatever answer comes back, then asks
        ``ATI`` until the reply starts with ``WBH-Diag``.

        Returns:
            The identification text

        Raises:
            NoIdentificationError: If every attempt failed
        """
        if self._state == InterfaceState.READY:
            return self._identification
        if self._state == InterfaceState.CLOSED:
            raise InterfaceStateError(f"Interface {self.name} is closed")

        settings = self._settings
        self._set_state(InterfaceState.IDENTIFYING)

        with self._lock:
            try:
                self._drain()

                for attempt in range(1, settings.ident_attempts + 1):
                    logger.debug(f"Identification attempt {attempt}/{settings.ident_attempts}")
                    self._transport.write_command(b"ATI")
                    try:
                        raw = self._transport.read_until(settings.response_size, settings.ident_timeout)
                    except TransportTimeout:
                        logger.warning(f"No answer to ATI on {self.name} (attempt {attempt})")
                        continue

                    text = decode_response(raw).strip()
                    if text.startswith(self.IDENT_PREFIX):
                        self._identification = text
                        self._set_state(InterfaceState.READY)
                        logger.info(f"Interface on {self.name} identified: {text}")
                        return text

                    logger.warning(f"Unexpected ATI response on {self.name}: {text!r}")
            except WBHError:
                self._set_state(InterfaceState.FAILED)
                raise

        self._set_state(InterfaceState.FAILED)
        raise NoIdentificationError(
            f"No {self.IDENT_PREFIX} interface on {self.name} "
            f"after {settings.ident_attempts} attempts"
        )

    def _drain(self) -> None:
        """Prod the interface with a bare CR and discard the answer."""
        self._transport.write_command(b"")
        try:
            self._transport.read_until(self._settings.drain_size, self._settings.drain_timeout)
        except TransportTimeout as e:
            logger.debug(f"Nothing to drain on {self.name} ({len(e.received)} bytes seen)")

    def shutdown(self) -> None:
        """Close the channel. Never fails."""
        if self._state == InterfaceState.CLOSED:
            return

        if self._device is not None:
            logger.warning(f"Shutting down {self.name} with device 0x{self._device.device_id:02X} still connected")
            self._device._release()
            self._device = None

        self._channel.close()
        self._set_state(InterfaceState.CLOSED)
        logger.info(f"Interface on {self.name} shut down")

    # ============ Commands ============

    def command(
        self,
        cmd: Union[str, bytes],
        size: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Send one command and return its response text.

        The response has CR turned into LF and one trailing prompt removed.
        """
        if isinstance(cmd, str):
            cmd = cmd.encode("ascii")
        size = size or self._settings.response_size
        if timeout is None:
            timeout = self._settings.command_timeout

        with self._lock:
            raw = self._transport.exchange(cmd, size, timeout)
        return decode_response(raw)

    @records_errors
    def flush(self) -> None:
        """Discard residual bytes in both directions."""
        with self._lock:
            self._channel.flush()

    @requires_ready
    def reset(self) -> None:
        """Soft-reset the interface (ATZ)."""
        self.command("ATZ", timeout=self._settings.reset_timeout)
        logger.info(f"Interface on {self.name} reset")

    @requires_ready
    def force_baud_rate(self, rate: Union[BaudRate, int]) -> None:
        """
        Force the baud rate class used for ECU connections (ATN).

        Raises:
            InvalidArgumentError: If rate is not a known class
        """
        try:
            rate = BaudRate(rate)
        except ValueError:
            raise InvalidArgumentError(f"Invalid baud rate class: {rate!r}") from None

        self.command(f"ATN{rate.value}", timeout=self._settings.baud_timeout)
        logger.info(f"Forced baud rate {rate.name} on {self.name}")

    @requires_ready
    def get_analog(self, pin: int) -> int:
        """
        Read an analog input pin (ATA).

        Args:
            pin: Pin number 0..5

        Returns:
            Raw analog value
        """
        if pin not in ANALOG_PINS:
            raise InvalidArgumentError(f"Analog pin must be 0..5, got {pin}")

        text = check_response(self.command(f"ATA{pin}", timeout=self._settings.analog_timeout))
        return parse_number(text, 10)

    def get_block_delay_time(self) -> int:
        """Block delay time in ms."""
        return self._get_timing("BDT")

    def set_block_delay_time(self, ms: int) -> None:
        """Set block delay time in ms."""
        self._set_timing("BDT", ms)

    def get_inter_byte_time(self) -> int:
        """Inter-byte time in ms."""
        return self._get_timing("IBT")

    def set_inter_byte_time(self, ms: int) -> None:
        """Set inter-byte time in ms."""
        self._set_timing("IBT", ms)

    @requires_ready
    def _get_timing(self, parameter: str) -> int:
        text = check_response(self.command(f"AT{parameter}?", timeout=self._settings.timing_timeout))
        return parse_number(text, 16)

    @requires_ready
    def _set_timing(self, parameter: str, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise InvalidArgumentError(f"{parameter} must be 0..255 ms, got {value}")
        check_response(self.command(f"AT{parameter}{value:02X}", timeout=self._settings.timing_timeout))
        logger.debug(f"{parameter} set to {value} ms on {self.name}")

    # ============ Device bookkeeping ============

    def _attach(self, device: "DeviceConnection") -> None:
        if self._device is not None:
            raise InterfaceStateError(
                f"Device 0x{self._device.device_id:02X} is still connected on {self.name}"
            )
        self._device = device

    def _detach(self, device: "DeviceConnection") -> None:
        if self._device is device:
            self._device = None

    def get_status_info(self) -> dict:
        """Get detailed status information."""
        return {
            "port": self.name,
            "state": self._state.value,
            "identification": self._identification,
            "device": f"0x{self._device.device_id:02X}" if self._device else None,
            "last_error": self._last_error,
        }

    def __enter__(self):
        """Context manager entry."""
        if not self.is_ready:
            self.bring_up()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.shutdown()
        return False

    def __repr__(self) -> str:
        return f"WBHInterface({self.name!r}, state={self._state.value})"
