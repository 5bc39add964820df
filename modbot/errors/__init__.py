"""Error types and error logging helpers."""

from .handling import classify_error, log_error  # noqa: F401
from .internal import (  # noqa: F401
    ConfigError,
    ConnectRetryExhaustedError,
    FatalIOError,
    InternalError,
    NetworkError,
    TransientConnectError,
)

__all__ = [
    "InternalError",
    "NetworkError",
    "TransientConnectError",
    "ConnectRetryExhaustedError",
    "FatalIOError",
    "ConfigError",
    "classify_error",
    "log_error",
]
