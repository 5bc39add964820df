"""Bot orchestration: the ModBot session, console sources and runner."""

from .console import ConsoleSource, StdinConsole  # noqa: F401
from .core import ModBot  # noqa: F401
from .runner import run_bot  # noqa: F401
from .signal_handler import SignalHandler  # noqa: F401

__all__ = ["ConsoleSource", "ModBot", "SignalHandler", "StdinConsole", "run_bot"]
