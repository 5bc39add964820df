import asyncio
import socket

import pytest

from modbot.bot.runner import run_bot
from tests.fixtures.fakes import QueueConsole, build_config


def _closed_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.mark.asyncio
async def test_unreachable_server_exits_with_error_code():
    cfg = build_config(server="127.0.0.1", port=_closed_port(), connect_max_attempts=1)
    code = await run_bot(cfg, QueueConsole(), install_signals=False)
    assert code == 1


@pytest.mark.asyncio
async def test_console_quit_exits_cleanly():
    received: list[str] = []

    async def handle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        while data := await reader.readline():
            received.append(data.decode().rstrip("\r\n"))
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    console = QueueConsole()
    console.type("!quit")
    cfg = build_config(server="127.0.0.1", port=port)
    try:
        code = await asyncio.wait_for(
            run_bot(cfg, console, install_signals=False), timeout=5
        )
        # let the server drain what the client wrote before it closed
        await asyncio.sleep(0.05)
    finally:
        server.close()
        await server.wait_closed()

    assert code == 0
    assert received[:3] == ["PASS oauth:abcdefghijklmnop", "NICK modbot", "JOIN #chan"]
    assert "PRIVMSG #chan :Shutting down bot :(" in received
