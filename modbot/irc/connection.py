"""Socket lifecycle for one chat session: dial with backoff, handshake, I/O."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    stop_never,
    wait_exponential_jitter,
)

from ..config.model import SessionConfig
from ..constants import MEMBERSHIP_CAPABILITY
from ..errors.internal import (
    ConnectRetryExhaustedError,
    FatalIOError,
    TransientConnectError,
)
from ..logs.logger import logger
from .parser import encode_line, format_outbound, format_pong

OpenConnection = Callable[
    [str, int], Awaitable[tuple[asyncio.StreamReader, asyncio.StreamWriter]]
]


class SessionConnection:
    """Owns the stream pair for the session.

    Reads come only from the inbound reader task and are not locked; every
    write goes through one lock so lines are never interleaved.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        open_connection: OpenConnection | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self.config = config
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None
        self.attempts = 0
        self._open_connection = open_connection or asyncio.open_connection
        self._sleep = sleep or asyncio.sleep
        self._write_lock = asyncio.Lock()
        self._closed = False

    @property
    def connected(self) -> bool:
        return self.writer is not None and not self._closed

    async def connect(self) -> None:
        """Dial the server, retrying with capped, jittered exponential backoff.

        Raises:
            ConnectRetryExhaustedError: After ``connect_max_attempts`` failures.
        """
        cfg = self.config
        self._closed = False
        self.attempts = 0
        retrying = AsyncRetrying(
            stop=(
                stop_after_attempt(cfg.connect_max_attempts)
                if cfg.connect_max_attempts
                else stop_never
            ),
            wait=wait_exponential_jitter(
                multiplier=cfg.connect_backoff_base,
                max=cfg.connect_backoff_max,
                jitter=cfg.connect_backoff_base,
            ),
            retry=retry_if_exception_type(TransientConnectError),
            before_sleep=self._log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    await self._dial_once()
        except TransientConnectError as e:
            logger.log_event(
                "irc",
                "connect_give_up",
                level=logging.ERROR,
                attempts=self.attempts,
                server=cfg.server,
                port=cfg.port,
            )
            raise ConnectRetryExhaustedError(
                f"Could not connect to {cfg.server}:{cfg.port} after {self.attempts} attempts",
                attempts=self.attempts,
            ) from e

    async def _dial_once(self) -> None:
        cfg = self.config
        self.attempts += 1
        logger.log_event(
            "irc",
            "connect_start",
            server=cfg.server,
            port=cfg.port,
            attempt=self.attempts,
        )
        try:
            self.reader, self.writer = await asyncio.wait_for(
                self._open_connection(cfg.server, cfg.port),
                timeout=cfg.connect_timeout,
            )
        except (OSError, TimeoutError) as e:
            raise TransientConnectError(
                f"Cannot connect to {cfg.server}:{cfg.port}: {e or type(e).__name__}",
                data={"attempt": self.attempts},
            ) from e
        logger.log_event("irc", "connected", server=cfg.server, port=cfg.port)

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
        logger.log_event(
            "irc",
            "connect_retry",
            level=logging.WARNING,
            attempt=retry_state.attempt_number,
            wait_time=round(wait, 2),
            error=str(error),
        )

    async def authenticate(self) -> None:
        """Send credential, nickname and channel join, in that order.

        Raises:
            FatalIOError: If any handshake write fails.
        """
        cfg = self.config
        await self.send_line(f"PASS {cfg.token}")
        await self.send_line(f"NICK {cfg.nickname}")
        await self.send_line(f"JOIN {cfg.channel}")
        if cfg.request_membership:
            await self.send_line(f"CAP REQ :{MEMBERSHIP_CAPABILITY}")
        logger.log_event(
            "irc", "auth_sent", user=cfg.nickname, channel=cfg.channel
        )

    async def send_line(self, line: str) -> None:
        """Write one protocol line under the write lock.

        Raises:
            FatalIOError: If the connection is closed or the write fails.
        """
        async with self._write_lock:
            if not self.connected or self.writer is None:
                raise FatalIOError("Connection is not open", data={"line": _redact(line)})
            try:
                self.writer.write(encode_line(line))
                await self.writer.drain()
            except (OSError, RuntimeError) as e:
                raise FatalIOError(
                    f"Write failed: {e or type(e).__name__}",
                    data={"line": _redact(line)},
                ) from e
        logger.log_event("irc", "sent", level=logging.DEBUG, line=_redact(line))

    async def send_privmsg(self, text: str) -> None:
        await self.send_line(format_outbound(self.config.channel, text))

    async def send_pong(self, token: str) -> None:
        await self.send_line(format_pong(token))

    async def read_line(self) -> str:
        """Return the next inbound line without its terminator.

        Raises:
            FatalIOError: On a read error or when the server closes the stream.
        """
        if self.reader is None or self._closed:
            raise FatalIOError("Connection is not open")
        try:
            data = await self.reader.readline()
        except (OSError, ValueError, asyncio.IncompleteReadError) as e:
            raise FatalIOError(f"Read failed: {e or type(e).__name__}") from e
        if not data:
            raise FatalIOError("Connection closed by server")
        return data.decode("utf-8", errors="replace").rstrip("\r\n")

    async def close(self) -> bool:
        """Release the socket. Safe to call more than once.

        Returns:
            True if this call closed the connection, False if already closed.
        """
        if self._closed:
            return False
        self._closed = True
        writer, self.writer, self.reader = self.writer, None, None
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, RuntimeError) as e:
                logger.log_event(
                    "irc", "close_error", level=logging.DEBUG, error=str(e)
                )
        logger.log_event("irc", "disconnected", level=logging.WARNING)
        return True


def _redact(line: str) -> str:
    return "PASS oauth:***" if line.startswith("PASS ") else line
