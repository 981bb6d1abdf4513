"""Prompt-delimited framing on top of a byte channel."""

import logging
from typing import Optional

from .channel import ByteChannel
from ..exceptions import TransportTimeout

logger = logging.getLogger(__name__)

PROMPT = b">"
TERMINATOR = b"\r"


class FramedTransport:
    """
    Command/response framing for the WBH-Diag link.

    Commands are terminated with a carriage return. Responses have no length
    header; the interface ends every frame with a ``>`` prompt, so reads run
    until that byte arrives, the caller's buffer is full, or the timeout
    budget is spent.
    """

    def __init__(self, channel: ByteChannel, poll_interval: float = 1.0):
        self._channel = channel
        self._poll_interval = poll_interval

    def write_command(self, payload: bytes) -> None:
        """Write a command followed by the line terminator, as two writes."""
        self._channel.write(payload)
        self._channel.write(TERMINATOR)

    def read_until(
        self,
        size: int,
        timeout: float,
        sentinel: Optional[bytes] = PROMPT,
    ) -> bytes:
        """
        Read a response frame.

        Args:
            size: Maximum number of bytes to capture
            timeout: Seconds of silence tolerated before giving up
            sentinel: Byte that ends the frame (None reads until full or timeout)

        Returns:
            Captured bytes, CR already turned into LF. Ends with the sentinel
            when it was seen, otherwise exactly ``size`` bytes long.

        Raises:
            TransportTimeout: If the budget ran out before the frame ended
        """
        buf = bytearray()
        remaining = float(timeout)

        while len(buf) < size:
            available = self._channel.read_available()
            if not available:
                if not self._channel.wait_readable(self._poll_interval):
                    remaining -= self._poll_interval
                    if remaining <= 0:
                        raise TransportTimeout(
                            f"No response from {self._channel.name} within {timeout}s",
                            received=bytes(buf),
                        )
                continue

            chunk = self._channel.read_nonblocking(min(available, size - len(buf)))
            if not chunk:
                continue
            buf += chunk

            if sentinel is not None and chunk[-1:] == sentinel:
                return bytes(buf)

        return bytes(buf)

    def exchange(self, payload: bytes, size: int, timeout: float) -> bytes:
        """Write a command and read its prompt-terminated response."""
        self.write_command(payload)
        return self.read_until(size, timeout)
