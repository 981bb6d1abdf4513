"""Pytest fixtures for wbh-diag tests."""

from collections import deque

import pytest
import serial

from wbh_diag.config import WBHSettings
from wbh_diag.connection.channel import ByteChannel
from wbh_diag.connection.interface import WBHInterface


class FakeSerial:
    """
    Scripted stand-in for serial.Serial.

    Replies are registered per command and queued for reading when the
    command, terminated by CR, is written. Each reply chunk is handed out by
    a separate read. The last registered reply for a command is reused.
    """

    def __init__(self, port: str = "/dev/fake"):
        self.port = port
        self.is_open = True
        self.timeout = 0
        self.written = bytearray()
        self.commands = []
        self.fail_writes = False
        self.fail_reads = False
        self._line = bytearray()
        self._replies = {}
        self._rx = deque()

    def reply(self, command: str, *chunks) -> None:
        """Register the reply for the next time ``command`` is written."""
        encoded = [c.encode("latin-1") if isinstance(c, str) else c for c in chunks]
        self._replies.setdefault(command, deque()).append(encoded)

    def feed(self, *chunks) -> None:
        """Make bytes available for reading right away."""
        for c in chunks:
            self._rx.append(c.encode("latin-1") if isinstance(c, str) else c)

    @property
    def in_waiting(self) -> int:
        if self.fail_reads:
            raise serial.SerialException("device disconnected")
        return len(self._rx[0]) if self._rx else 0

    def read(self, size: int = 1) -> bytes:
        if self.fail_reads:
            raise serial.SerialException("device disconnected")
        if not self._rx:
            return b""
        head = self._rx[0]
        data, rest = head[:size], head[size:]
        if rest:
            self._rx[0] = rest
        else:
            self._rx.popleft()
        return data

    def write(self, data: bytes) -> int:
        if self.fail_writes:
            raise serial.SerialException("write failed")
        self.written += data
        for byte in data:
            if byte == 0x0D:
                command = self._line.decode("latin-1")
                self._line.clear()
                self.commands.append(command)
                queue = self._replies.get(command)
                if queue:
                    chunks = queue[0] if len(queue) == 1 else queue.popleft()
                    self._rx.extend(chunks)
            else:
                self._line.append(byte)
        return len(data)

    def reset_input_buffer(self) -> None:
        self._rx.clear()

    def reset_output_buffer(self) -> None:
        pass

    def close(self) -> None:
        self.is_open = False


@pytest.fixture
def fake_serial():
    """A scripted fake serial port."""
    return FakeSerial()


@pytest.fixture
def channel(fake_serial):
    """Byte channel over the fake port."""
    return ByteChannel(fake_serial, "/dev/fake")


@pytest.fixture
def settings():
    """Settings with short timeouts so silent exchanges end quickly."""
    return WBHSettings(
        port="/dev/fake",
        drain_timeout=1,
        ident_timeout=2,
        connect_timeout=2,
        disconnect_timeout=2,
        dtc_timeout=2,
    )


@pytest.fixture
def interface(channel, settings):
    """Interface that has not run its handshake yet."""
    return WBHInterface(channel, settings)


@pytest.fixture
def ready_interface(fake_serial, interface):
    """Interface that has identified itself."""
    fake_serial.reply("", ">")
    fake_serial.reply("ATI", "WBH-Diag V1.0\r>")
    interface.bring_up()
    fake_serial.commands.clear()
    return interface


@pytest.fixture
def connect_reply(fake_serial):
    """Register a CONNECT (or other) reply for a device id."""
    def register(device_id: int, text: str = "CONNECT: 41\r>"):
        fake_serial.reply(f"ATD{device_id:02X}", text)
        fake_serial.reply("ATH", ">")
    return register
