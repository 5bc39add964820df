from __future__ import annotations

from ..logging_config import log_structured_error
from .internal import (
    ConfigError,
    ConnectRetryExhaustedError,
    FatalIOError,
    InternalError,
    NetworkError,
)


def classify_error(error: BaseException) -> str:
    """Return the aggregation category for an exception."""
    if isinstance(error, NetworkError | ConnectRetryExhaustedError):
        return "network"
    if isinstance(error, FatalIOError | OSError | ConnectionError):
        return "io"
    if isinstance(error, ConfigError):
        return "config"
    if isinstance(error, InternalError):
        return "internal"
    return "unknown"


def log_error(
    message: str, error: BaseException, context: dict[str, object] | None = None
) -> None:
    """Logs an error message with the associated exception details.

    The error is categorized (network, io, config, internal) and routed through
    structured logging so repeated failures are aggregated.

    Args:
        message: A descriptive message about the error context.
        error: The exception instance to be logged.
        context: Optional additional context data for debugging.
    """
    merged: dict[str, object] = {}
    if isinstance(error, InternalError) and error.data:
        merged.update(error.data)
    if context:
        merged.update(context)
    log_structured_error(
        error_type=classify_error(error),
        message=f"{message}: {str(error)}",
        exception=error,
        context=merged or None,
    )
