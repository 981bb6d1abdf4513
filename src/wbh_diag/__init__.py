"""Driver for WBH-Diag K-line diagnostic interfaces."""

__version__ = "0.1.0"

from .config import WBHSettings
from .connection import DeviceConnection, WBHInterface
from .exceptions import WBHError

__all__ = ["WBHSettings", "DeviceConnection", "WBHInterface", "WBHError", "__version__"]
