"""SignalHandler - turns SIGINT/SIGTERM into an orderly bot shutdown."""

import asyncio
import logging
import signal
from collections.abc import Callable


class SignalHandler:
    """Handler for system signals and shutdown coordination."""

    def __init__(self, on_shutdown: Callable[[], None]) -> None:
        self.shutdown_initiated = False
        self._on_shutdown = on_shutdown

    def stop(self, signum: int | None = None) -> None:
        """Initiate shutdown; only the first call has an effect."""
        if self.shutdown_initiated:
            return
        if signum is not None:
            logging.warning(
                f"🛑 Signal received - initiating shutdown (signal={signum})"
            )
        self.shutdown_initiated = True
        self._on_shutdown()

    def setup_signal_handlers(self) -> None:  # pragma: no cover
        """Set up signal handlers for graceful shutdown on SIGINT/SIGTERM."""
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop, sig)
            except NotImplementedError:
                # Platforms without loop signal support: hop back onto the loop
                signal.signal(
                    sig,
                    lambda signum, _frame: loop.call_soon_threadsafe(self.stop, signum),
                )
