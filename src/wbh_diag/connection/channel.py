"""Raw byte channel over a serial device."""

import logging
import os

import serial

from ..exceptions import OpenFailedError, SerialIOError

logger = logging.getLogger(__name__)


def normalize_line_endings(data: bytes) -> bytes:
    """Replace every carriage return with a line feed, leaving other bytes alone."""
    return data.replace(b"\r", b"\n")


class ByteChannel:
    """Unbuffered read/write access to a serial device in raw mode."""

    def __init__(self, port: serial.Serial, name: str = ""):
        """
        Wrap an already opened serial port.

        Args:
            port: Open pyserial port (or a compatible object)
            name: Device path, used for logging
        """
        self._port = port
        self._name = name or getattr(port, "port", "") or ""
        # Byte consumed while waiting for data, handed out on the next read
        self._pending = b""

    @classmethod
    def open(cls, path: str, baudrate: int = 9600) -> "ByteChannel":
        """
        Open a serial device for raw, exclusive read/write access.

        No flow control, no echo, no line processing. Anything already
        queued in either direction is discarded.

        Raises:
            OpenFailedError: If the device cannot be opened
        """
        kwargs = dict(
            port=path,
            baudrate=baudrate,
            bytesize=serial.EIGHTBITS,
            parity=serial.PARITY_NONE,
            stopbits=serial.STOPBITS_ONE,
            timeout=0,
            xonxoff=False,
            rtscts=False,
            dsrdtr=False,
        )
        if os.name == "posix":
            kwargs["exclusive"] = True

        try:
            port = serial.Serial(**kwargs)
            port.reset_input_buffer()
            port.reset_output_buffer()
        except (serial.SerialException, OSError, ValueError) as e:
            raise OpenFailedError(f"Cannot open {path}: {e}") from e

        logger.debug(f"Opened {path} at {baudrate} baud")
        return cls(port, path)

    @property
    def name(self) -> str:
        """Device path."""
        return self._name

    @property
    def is_open(self) -> bool:
        """Check if the underlying port is open."""
        return bool(getattr(self._port, "is_open", False))

    def write(self, data: bytes) -> int:
        """
        Write bytes unmodified.

        Returns:
            Number of bytes written
        """
        try:
            count = self._port.write(data)
        except (serial.SerialException, OSError) as e:
            raise SerialIOError(f"Write to {self._name} failed: {e}") from e

        if count is None:
            count = len(data)
        logger.debug(
            f"WRITE: -{normalize_line_endings(data).decode('ascii', 'replace')}- "
            f"({len(data)}/{count})"
        )
        return count

    def read_available(self) -> int:
        """Number of bytes that can be read right now without blocking."""
        try:
            waiting = self._port.in_waiting
        except (serial.SerialException, OSError) as e:
            raise SerialIOError(f"Status query on {self._name} failed: {e}") from e
        return len(self._pending) + waiting

    def read_nonblocking(self, size: int) -> bytes:
        """
        Read up to ``size`` currently available bytes. Never blocks.

        Carriage returns are turned into line feeds.
        """
        if size <= 0:
            return b""

        data = self._pending[:size]
        self._pending = self._pending[size:]

        wanted = size - len(data)
        if wanted > 0:
            try:
                waiting = self._port.in_waiting
                if waiting:
                    data += self._port.read(min(wanted, waiting))
            except (serial.SerialException, OSError) as e:
                raise SerialIOError(f"Read from {self._name} failed: {e}") from e

        data = normalize_line_endings(data)
        if data:
            logger.debug(f"READ: {data.decode('ascii', 'replace')}")
        return data

    def wait_readable(self, timeout: float) -> bool:
        """
        Block until at least one byte is available or ``timeout`` expires.

        Returns:
            True if data is available
        """
        if self._pending:
            return True

        try:
            self._port.timeout = timeout
            try:
                first = self._port.read(1)
            finally:
                self._port.timeout = 0
        except (serial.SerialException, OSError) as e:
            raise SerialIOError(f"Read from {self._name} failed: {e}") from e

        if first:
            self._pending += first
            return True
        return False

    def flush(self) -> None:
        """Discard any unread input and unsent output."""
        self._pending = b""
        try:
            self._port.reset_input_buffer()
            self._port.reset_output_buffer()
        except (serial.SerialException, OSError) as e:
            raise SerialIOError(f"Flush of {self._name} failed: {e}") from e

    def close(self) -> None:
        """Close the device. Never raises."""
        self._pending = b""
        try:
            self._port.close()
        except Exception as e:
            logger.warning(f"Error closing {self._name}: {e}")
        logger.debug(f"Closed {self._name}")

    def __repr__(self) -> str:
        return f"ByteChannel({self._name!r})"
