"""Core application components."""

from .config import Settings, settings
from .errors import BoardError, ConfigurationError, ConnectivityError
from .result import BatchResult, ErrorInfo, ErrorKind, Result

__all__ = [
    "settings",
    "Settings",
    "BoardError",
    "ConfigurationError",
    "ConnectivityError",
    "Result",
    "BatchResult",
    "ErrorInfo",
    "ErrorKind",
]
