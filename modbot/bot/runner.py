"""Process-level runner: wires signals and console into one ModBot session."""

from __future__ import annotations

import logging

from ..config.model import SessionConfig
from ..errors.handling import log_error
from ..errors.internal import InternalError
from ..logging_config import error_aggregator
from .console import ConsoleSource, StdinConsole
from .core import ModBot
from .signal_handler import SignalHandler


async def run_bot(
    config: SessionConfig,
    console: ConsoleSource | None = None,
    *,
    install_signals: bool = True,
) -> int:
    """Run one bot session and return a process exit code.

    Args:
        config: Session settings.
        console: Operator input; defaults to stdin.
        install_signals: Register SIGINT/SIGTERM handlers on the running loop.

    Returns:
        0 after a requested stop, 1 after a connect or I/O failure.
    """
    bot = ModBot(config, console=console or StdinConsole())
    if install_signals:
        signals = SignalHandler(lambda: bot.request_stop("signal"))
        signals.setup_signal_handlers()
    logging.info(
        f"🚀 Starting bot nickname={config.nickname} channel={config.channel}"
    )
    try:
        await bot.run()
    except InternalError as e:
        log_error("Session ended with an error", e)
        return 1
    finally:
        error_aggregator.log_summary_report()
    logging.info(f"🏁 Bot stopped reason={bot.stop_reason}")
    return 0
