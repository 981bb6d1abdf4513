"""Exceptions raised by the WBH-Diag driver."""


class WBHError(Exception):
    """Base class for all WBH-Diag errors."""


class OpenFailedError(WBHError):
    """The serial device could not be opened."""


class TransportTimeout(WBHError):
    """No response from the interface within the timeout budget."""

    def __init__(self, message: str = "Timeout waiting for response", received: bytes = b""):
        self.received = received
        super().__init__(message)


class SerialIOError(WBHError):
    """Serial I/O failed mid-transfer."""


class InvalidArgumentError(WBHError, ValueError):
    """A parameter was outside its documented range. Raised before any I/O."""


class ConnectRejectedError(WBHError):
    """The interface answered ERROR to a connect request."""


class UnexpectedResponseError(WBHError):
    """The interface answered something that could not be parsed."""


class NoIdentificationError(WBHError):
    """The interface never identified itself as a WBH-Diag."""


class UnsupportedFormatError(WBHError):
    """The measurement response uses a format this decoder does not know."""


class CommandSyntaxError(WBHError):
    """The interface rejected a command with '?'."""


class DataError(WBHError):
    """The interface reported DATA ERROR."""


class InterfaceStateError(WBHError):
    """Operation not allowed in the current interface or connection state."""


def check_response(text: str) -> str:
    """
    Raise if a response carries one of the interface's error markers.

    Args:
        text: Normalized response text (prompt already stripped)

    Returns:
        The response text unchanged
    """
    first_line = text.strip().split("\n", 1)[0].strip() if text.strip() else ""

    if first_line == "?":
        raise CommandSyntaxError("Interface rejected command syntax ('?')")
    if first_line.startswith("DATA ERROR"):
        raise DataError("Interface reported DATA ERROR")

    return text
