"""Console line sources feeding the bot's command path."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Protocol, TextIO


class ConsoleSource(Protocol):
    async def readline(self) -> str | None:
        """Return the next line without its terminator, or None at EOF."""


class StdinConsole:
    """Reads operator input from stdin without blocking the event loop.

    Pipes and terminals are attached to an asyncio StreamReader so a pending
    read can be cancelled at shutdown. Regular files cannot be polled; those
    fall back to reading in a worker thread.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin
        self._reader: asyncio.StreamReader | None = None
        self._attached = False

    async def _attach(self) -> None:
        self._attached = True
        loop = asyncio.get_running_loop()
        reader = asyncio.StreamReader()
        try:
            await loop.connect_read_pipe(
                lambda: asyncio.StreamReaderProtocol(reader), self._stream
            )
        except (ValueError, OSError) as e:
            logging.debug(f"Console not pollable, using thread reads: {e}")
            return
        self._reader = reader

    async def readline(self) -> str | None:
        if not self._attached:
            await self._attach()
        if self._reader is not None:
            data = await self._reader.readline()
            if not data:
                return None
            return data.decode("utf-8", errors="replace").rstrip("\r\n")
        line = await asyncio.to_thread(self._stream.readline)
        if not line:
            return None
        return line.rstrip("\r\n")
