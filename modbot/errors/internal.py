"""Centralized internal error hierarchy.

These exceptions provide semantic categories for retry logic and the session
teardown path. Raw socket / asyncio errors are wrapped at the connection
boundary; code above it only ever sees these types.

Classes:
  InternalError              - Base for all internal errors.
  NetworkError               - Transient network/IO issues (safe to retry).
  TransientConnectError      - A single failed dial attempt.
  ConnectRetryExhaustedError - Dial attempt ceiling exceeded; fatal.
  FatalIOError               - Read/write failure on an established session.
  ConfigError                - Invalid or incomplete configuration.
"""

from __future__ import annotations

from collections.abc import Mapping


class InternalError(Exception):
    """Base class for all internal application errors with metadata support.

    Attributes:
        data: Dictionary containing arbitrary structured context data.

    Args:
        message: Descriptive error message.
        data: Optional mapping of additional context data.
    """

    data: dict[str, object]

    def __init__(
        self, message: str, *, data: Mapping[str, object] | None = None
    ) -> None:
        super().__init__(message)
        # Copy into a plain dict to avoid unexpected mutations from caller.
        self.data = dict(data) if data else {}


class NetworkError(InternalError):
    """Exception raised for network or transport layer errors.

    This includes issues such as connection timeouts, resets, or refused
    connections that may be retried.
    """


class TransientConnectError(NetworkError):
    """Exception raised when one attempt to dial the chat server fails.

    Retried by the connection's backoff loop; never surfaced as fatal on
    its own.
    """


class ConnectRetryExhaustedError(InternalError):
    """Exception raised when the dial attempt ceiling has been exceeded.

    Args:
        message: The error message.
        attempts: Number of attempts that were made.
    """

    def __init__(self, message: str, *, attempts: int) -> None:
        super().__init__(message, data={"attempts": attempts})
        self.attempts = attempts


class FatalIOError(InternalError):
    """Exception raised for I/O failures on an established connection.

    A write that fails, a read error mid-stream, or the server closing the
    stream all end the session. Sends are never retried on a stale connection.
    """


class ConfigError(InternalError):
    """Exception raised when the session configuration is invalid."""


__all__ = [
    "InternalError",
    "NetworkError",
    "TransientConnectError",
    "ConnectRetryExhaustedError",
    "FatalIOError",
    "ConfigError",
]
