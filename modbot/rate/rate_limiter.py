"""Outbound chat rate limiter: one global cooldown between sends."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable


class ChatRateLimiter:
    """Serializes chat sends so two are never closer than ``min_interval``.

    Waiting, sending and recording the send time happen inside one lock, so
    callers that have to wait are served in the order they arrived and no
    request is ever dropped.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.min_interval = min_interval
        self.last_send_at: float | None = None
        self.sent_count = 0
        self._clock = clock
        self._lock = asyncio.Lock()

    def snapshot(self) -> dict[str, object]:
        """Return a serializable snapshot of limiter state for debugging."""
        return {
            "min_interval": self.min_interval,
            "last_send_at": self.last_send_at,
            "cooldown_remaining": self.cooldown_remaining(),
            "sent_count": self.sent_count,
            "locked": self._lock.locked(),
        }

    def cooldown_remaining(self) -> float:
        if self.last_send_at is None:
            return 0.0
        return max(0.0, self.last_send_at + self.min_interval - self._clock())

    async def send(self, text: str, sink: Callable[[str], Awaitable[None]]) -> bool:
        """Send ``text`` through ``sink`` once the cooldown allows it.

        Args:
            text: Chat text; empty text is ignored.
            sink: Coroutine performing the actual write.

        Returns:
            True if the text was sent, False for empty text.

        Raises:
            Whatever ``sink`` raises; the send time is not recorded then.
        """
        if not text:
            return False
        async with self._lock:
            # Re-check in a loop: a coarse clock may wake the sleep early.
            while (delay := self.cooldown_remaining()) > 0:
                level = logging.DEBUG if delay <= 1 else logging.INFO
                logging.log(level, f"⏳ Chat cooldown active, waiting {round(delay, 2)}s")
                await asyncio.sleep(delay)
            await sink(text)
            self.last_send_at = self._clock()
            self.sent_count += 1
        return True
