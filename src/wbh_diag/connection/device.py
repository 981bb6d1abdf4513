"""Connections to individual ECUs behind the interface."""

import logging
from typing import Optional

from .interface import WBHInterface
from ..exceptions import (
    WBHError,
    ConnectRejectedError,
    InterfaceStateError,
    InvalidArgumentError,
    UnexpectedResponseError,
)
from ..models.device import DeviceInfo, Protocol

logger = logging.getLogger(__name__)

CONNECT_PREFIX = "CONNECT: "


def parse_connect_response(device_id: int, text: str) -> DeviceInfo:
    """
    Classify the interface's answer to ``ATD``.

    The baud rate class is the digit right after ``CONNECT: ``; the protocol
    is the digit after the following comma, or the next character when there
    is no comma.

    Raises:
        ConnectRejectedError: If the interface answered ERROR
        UnexpectedResponseError: If the answer is neither ERROR nor CONNECT
    """
    if text.startswith("ERROR"):
        raise ConnectRejectedError(f"Device 0x{device_id:02X} rejected connection")
    if not text.startswith(CONNECT_PREFIX):
        raise UnexpectedResponseError(
            f"Unexpected response when connecting to device 0x{device_id:02X}: {text.strip()!r}"
        )

    params = text[len(CONNECT_PREFIX):]
    baud_char = params[:1]
    comma = params.find(",")
    if comma >= 0:
        protocol_char = params[comma + 1:comma + 2]
    else:
        protocol_char = params[1:2]

    if not (baud_char.isdigit() and protocol_char.isdigit()):
        raise UnexpectedResponseError(
            f"Malformed CONNECT parameters for device 0x{device_id:02X}: {params.strip()!r}"
        )

    return DeviceInfo(
        device_id=device_id,
        baud_rate=int(baud_char),
        protocol_id=int(protocol_char),
        specs=text,
    )


class DeviceConnection:
    """
    An established link to one ECU.

    Holds a non-owning reference to the interface it was opened on; the
    interface must stay open for as long as the connection is in use. Only
    ``connect`` creates connections.
    """

    def __init__(self, interface: WBHInterface, info: DeviceInfo):
        self._interface = interface
        self._info = info
        self._connected = True

    @classmethod
    def connect(cls, interface: WBHInterface, device_id: int) -> "DeviceConnection":
        """
        Connect to an ECU (ATD).

        Args:
            interface: A ready interface
            device_id: ECU address 0..255

        Returns:
            The live connection

        Raises:
            ConnectRejectedError: If the ECU did not answer
            UnexpectedResponseError: If the interface's answer was unparseable
            TransportTimeout: If the interface stayed silent
        """
        if not 0 <= device_id <= 0xFF:
            raise InvalidArgumentError(f"Device id must be 0..255, got {device_id}")
        if not interface.is_ready:
            raise InterfaceStateError(f"Interface {interface.name} is not ready")
        if interface.device is not None:
            raise InterfaceStateError(
                f"Device 0x{interface.device.device_id:02X} is still connected on {interface.name}"
            )

        try:
            text = interface.command(
                f"ATD{device_id:02X}",
                timeout=interface.settings.connect_timeout,
            )
            info = parse_connect_response(device_id, text)
        except WBHError as e:
            interface.record_error(e)
            logger.debug(f"Connect to 0x{device_id:02X} failed: {e}")
            raise

        conn = cls(interface, info)
        interface._attach(conn)
        logger.info(f"Connected to device 0x{device_id:02X} ({info.protocol_name}, baud class {info.baud_rate})")
        return conn

    @property
    def interface(self) -> WBHInterface:
        """The interface this connection runs on."""
        return self._interface

    @property
    def info(self) -> DeviceInfo:
        """Parameters negotiated at connect time."""
        return self._info

    @property
    def device_id(self) -> int:
        """ECU address."""
        return self._info.device_id

    @property
    def protocol(self) -> Optional[Protocol]:
        """Negotiated protocol."""
        return self._info.protocol

    @property
    def baud_rate(self) -> int:
        """Negotiated baud rate class."""
        return self._info.baud_rate

    @property
    def specs(self) -> str:
        """Raw CONNECT response."""
        return self._info.specs

    @property
    def is_connected(self) -> bool:
        """Check if the connection is still live."""
        return self._connected

    def disconnect(self) -> None:
        """
        Hang up (ATH).

        The connection is released even when the hang-up fails; the error is
        still raised so the caller knows the interface state is uncertain.
        """
        if not self._connected:
            return

        self._connected = False
        self._interface._detach(self)

        try:
            self._interface.command("ATH", timeout=self._interface.settings.disconnect_timeout)
        except WBHError as e:
            self._interface.record_error(e)
            logger.warning(f"Hang-up from device 0x{self.device_id:02X} failed: {e}")
            raise

        self._interface.flush()
        logger.info(f"Disconnected from device 0x{self.device_id:02X}")

    def _release(self) -> None:
        """Mark the connection closed without talking to the interface."""
        self._connected = False

    def send_command(
        self,
        cmd: str,
        size: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Send a raw command to the ECU and return the response text.

        Args:
            cmd: Command without terminator (e.g. "02", "0801")
            size: Response buffer size in bytes
            timeout: Seconds to wait for the prompt

        Returns:
            Response text, CR turned into LF, trailing prompt removed
        """
        if not self._connected:
            raise InterfaceStateError(f"Device 0x{self.device_id:02X} is not connected")
        if not self._interface.is_ready:
            raise InterfaceStateError(f"Interface {self._interface.name} is not ready")

        try:
            return self._interface.command(cmd, size=size, timeout=timeout)
        except WBHError as e:
            self._interface.record_error(e)
            raise

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()
        return False

    def __repr__(self) -> str:
        state = "connected" if self._connected else "closed"
        return f"DeviceConnection(0x{self.device_id:02X}, {state})"
