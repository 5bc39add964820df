"""Session configuration: immutable model plus layered loader."""

from .loader import load_session_config  # noqa: F401
from .model import SessionConfig, normalize_username  # noqa: F401

__all__ = ["SessionConfig", "load_session_config", "normalize_username"]
