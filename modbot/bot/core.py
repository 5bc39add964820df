"""ModBot: session orchestration for reader, console and auto-broadcast tasks."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ..config.model import SessionConfig
from ..constants import (
    ANNOUNCE_BACKLOG_LIMIT,
    JOIN_ANNOUNCEMENT,
    MAX_PENDING_EVENTS,
    PART_ANNOUNCEMENT,
    SHUTDOWN_GRACE_SECONDS,
)
from ..errors.handling import log_error
from ..errors.internal import FatalIOError
from ..irc.connection import SessionConnection
from ..irc.models import (
    ChatLine,
    ConnectionState,
    InboundEvent,
    Ping,
    Unrecognized,
    UserJoined,
    UserLeft,
)
from ..irc.parser import parse_line
from ..logs.logger import logger
from ..moderation.actions import ModerationActions
from ..moderation.commands import CommandProcessor, DispatchOutcome, contains_link
from ..moderation.policy import ModeratorPolicy
from ..rate.rate_limiter import ChatRateLimiter
from .console import ConsoleSource


class ModBot:  # pylint: disable=too-many-instance-attributes
    """One chat session: connect, authenticate, then run until quit or failure.

    While running, three producers share the connection: the inbound reader,
    the console reader and the auto-broadcast timer. Every chat send goes
    through the rate limiter; keep-alive replies bypass it. Inbound events
    other than pings are handled in arrival order by a dispatch worker so the
    reader stays free to answer pings while sends wait out the cooldown.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        connection: SessionConnection | None = None,
        console: ConsoleSource | None = None,
        limiter: ChatRateLimiter | None = None,
        shutdown_grace: float = SHUTDOWN_GRACE_SECONDS,
    ) -> None:
        self.config = config
        self.connection = connection or SessionConnection(config)
        self.console = console
        self.limiter = limiter or ChatRateLimiter(config.min_send_interval)
        self.policy = ModeratorPolicy.from_config(config)
        self.actions = ModerationActions(self.policy, self.send_chat)
        self.commands = CommandProcessor(self.policy, self.actions, self.send_chat)
        self.shutdown_grace = shutdown_grace
        self.state = ConnectionState.IDLE
        self.stop_reason: str | None = None
        self.fatal_error: BaseException | None = None
        self._stop = asyncio.Event()
        self._events: asyncio.Queue[InboundEvent] = asyncio.Queue(
            maxsize=MAX_PENDING_EVENTS
        )
        self._tasks: list[asyncio.Task[Any]] = []

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def _set_state(self, new_state: ConnectionState) -> None:
        if self.state != new_state:
            logger.log_event(
                "bot",
                "state_change",
                level=logging.DEBUG,
                user=self.config.nickname,
                old_state=self.state.name,
                new_state=new_state.name,
            )
            self.state = new_state

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def request_stop(self, reason: str) -> None:
        """Signal every task to stop. Only the first reason is kept."""
        if self._stop.is_set():
            return
        self.stop_reason = reason
        logger.log_event("bot", "stop_requested", user=self.config.nickname, reason=reason)
        self._stop.set()

    async def run(self) -> None:
        """Run the session until quit, a signal, or a fatal I/O error.

        A stop requested while still connecting or authenticating abandons
        the setup, closes the connection and returns normally.

        Raises:
            ConnectRetryExhaustedError: If the server could not be reached.
            FatalIOError: If the handshake or the running session failed; the
                connection is already closed and all tasks stopped by then.
        """
        setup = asyncio.create_task(self._establish(), name="modbot-setup")
        stop_wait = asyncio.create_task(self._stop.wait(), name="modbot-setup-stop")
        try:
            await asyncio.wait({setup, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_wait.cancel()
            if not setup.done():
                setup.cancel()
                await asyncio.wait({setup})

        if setup.cancelled():
            await self._abort_setup()
            logger.log_event(
                "bot", "stopped", user=self.config.nickname, reason=self.stop_reason
            )
            return
        error = setup.exception()
        if error is not None:
            log_error("Session setup failed", error, context={"state": self.state.name})
            await self._abort_setup()
            raise error

        self._set_state(ConnectionState.RUNNING)
        logger.log_event(
            "bot", "running", user=self.config.nickname, channel=self.config.channel
        )
        self._spawn(self._reader_loop(), "reader")
        self._spawn(self._dispatch_loop(), "dispatcher")
        if self.config.auto_message and self.config.auto_message_interval > 0:
            self._spawn(self._broadcast_loop(), "broadcast")
        if self.console is not None:
            self._spawn(self._console_loop(), "console")

        try:
            await self._stop.wait()
        finally:
            await self._shutdown()
        if self.fatal_error is not None:
            raise self.fatal_error

    async def _establish(self) -> None:
        self._set_state(ConnectionState.CONNECTING)
        await self.connection.connect()
        self._set_state(ConnectionState.AUTHENTICATING)
        await self.connection.authenticate()

    async def _abort_setup(self) -> None:
        self._set_state(ConnectionState.CLOSING)
        await self.connection.close()
        self._set_state(ConnectionState.CLOSED)

    def _spawn(self, coro: Any, name: str) -> None:
        task = asyncio.create_task(coro, name=f"modbot-{name}")
        task.add_done_callback(self._on_task_done)
        self._tasks.append(task)

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is None:
            return
        if self.fatal_error is None and not self.stopping:
            self.fatal_error = error
        log_error(f"Task {task.get_name()} failed", error)
        self.request_stop("fatal_io" if isinstance(error, FatalIOError) else "task_error")

    async def _shutdown(self) -> None:
        self._set_state(ConnectionState.CLOSING)
        current = asyncio.current_task()
        pending = [t for t in self._tasks if t is not current and not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            _, still_running = await asyncio.wait(pending, timeout=self.shutdown_grace)
            for task in still_running:
                logger.log_event(
                    "bot", "task_unwind_timeout", level=logging.WARNING, task=task.get_name()
                )
        await self.connection.close()
        self._set_state(ConnectionState.CLOSED)
        logger.log_event(
            "bot", "stopped", user=self.config.nickname, reason=self.stop_reason
        )

    # ------------------------------------------------------------------ #
    # Outbound
    # ------------------------------------------------------------------ #
    async def send_chat(self, text: str) -> bool:
        """Send chat text through the shared rate limiter."""
        return await self.limiter.send(text, self._transmit)

    async def _transmit(self, text: str) -> None:
        await self.connection.send_privmsg(text)
        logger.log_event(
            "chat",
            "sent",
            user=self.config.nickname,
            channel=self.config.channel,
            chat_message=text,
        )

    async def quit(self) -> None:
        """Say goodbye in chat, then stop the session.

        A failed farewell still stops the session but is kept as the fatal
        error, so the session ends as a failure rather than a clean quit.
        """
        try:
            await self.send_chat(self.config.farewell_message)
        except FatalIOError as e:
            if self.fatal_error is None:
                self.fatal_error = e
            raise
        finally:
            self.request_stop("quit")

    # ------------------------------------------------------------------ #
    # Producers
    # ------------------------------------------------------------------ #
    async def _reader_loop(self) -> None:
        while True:
            raw = await self.connection.read_line()
            await self.handle_line(raw)

    async def _dispatch_loop(self) -> None:
        while True:
            event = await self._events.get()
            try:
                await self.handle_event(event)
            finally:
                self._events.task_done()

    async def _broadcast_loop(self) -> None:
        interval = self.config.auto_message_seconds
        while True:
            await asyncio.sleep(interval)
            await self.send_chat(self.config.auto_message)

    async def _console_loop(self) -> None:
        assert self.console is not None
        while True:
            line = await self.console.readline()
            if line is None:
                logger.log_event("console", "closed", level=logging.DEBUG)
                return
            if await self.handle_console_line(line) is DispatchOutcome.QUIT:
                return

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #
    async def handle_line(self, raw: str) -> None:
        """Classify one inbound line; pings are answered immediately.

        Other events wait for the dispatch worker. Join/part announcements
        are skipped once the backlog reaches ``ANNOUNCE_BACKLOG_LIMIT``; any
        event arriving with the queue full is dropped.
        """
        event = parse_line(raw, self.config.channel)
        if isinstance(event, Ping):
            await self.connection.send_pong(event.token)
            logger.log_event("irc", "pong", level=logging.DEBUG, token=event.token)
            return
        if isinstance(event, Unrecognized):
            logger.log_event("irc", "unrecognized", level=logging.DEBUG, raw=event.raw)
            return
        backlog = self._events.qsize()
        if isinstance(event, UserJoined | UserLeft) and backlog >= ANNOUNCE_BACKLOG_LIMIT:
            logger.log_event(
                "bot",
                "announce_skipped",
                level=logging.DEBUG,
                user=event.username,
                backlog=backlog,
            )
            return
        try:
            self._events.put_nowait(event)
        except asyncio.QueueFull:
            logger.log_event(
                "bot",
                "event_dropped",
                level=logging.WARNING,
                event=type(event).__name__,
                backlog=backlog,
            )

    async def handle_event(self, event: InboundEvent) -> None:
        match event:
            case Ping(token=token):
                await self.connection.send_pong(token)
            case UserJoined(username=username):
                if username != self.config.nickname:
                    await self.send_chat(JOIN_ANNOUNCEMENT.format(user=username))
            case UserLeft(username=username):
                if username != self.config.nickname:
                    await self.send_chat(PART_ANNOUNCEMENT.format(user=username))
            case ChatLine(username=username, text=text, is_command=True):
                logger.log_event(
                    "chat", "command", user=username, channel=self.config.channel, text=text
                )
                await self.commands.handle_text(username, text)
            case ChatLine(username=username, text=text):
                logger.log_event(
                    "chat",
                    "privmsg",
                    level=logging.DEBUG,
                    user=username,
                    channel=self.config.channel,
                    chat_message=text,
                )
                if contains_link(text, self.config.link_suffixes):
                    logger.log_event(
                        "moderation", "link_detected", user=username, chat_message=text
                    )
                    await self.actions.timeout(username)
            case Unrecognized():
                pass

    async def handle_console_line(self, line: str) -> DispatchOutcome | None:
        """Route one console line: '!quit', a '!' command, or plain chat.

        Console commands are issued as the channel owner.
        """
        text = line.strip()
        if not text:
            return None
        if text.startswith("!"):
            outcome = await self.commands.handle_text(
                self.config.owner, text, allow_quit=True
            )
            if outcome is DispatchOutcome.QUIT:
                await self.quit()
            return outcome
        await self.send_chat(text)
        return None

    async def wait_idle(self) -> None:
        """Wait until every queued inbound event has been handled."""
        await self._events.join()
