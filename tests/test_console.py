import os

import pytest

from modbot.bot.console import StdinConsole


@pytest.mark.asyncio
async def test_pipe_console_reads_lines_until_eof():
    read_fd, write_fd = os.pipe()
    with os.fdopen(read_fd, "r") as stream:
        console = StdinConsole(stream)
        os.write(write_fd, b"hello chat\r\n!quit\n")
        os.close(write_fd)
        assert await console.readline() == "hello chat"
        assert await console.readline() == "!quit"
        assert await console.readline() is None


@pytest.mark.asyncio
async def test_regular_file_falls_back_to_thread_reads(tmp_path):
    path = tmp_path / "commands.txt"
    path.write_text("!timeout spammer\nbye\n")
    with path.open("r") as stream:
        console = StdinConsole(stream)
        assert await console.readline() == "!timeout spammer"
        assert await console.readline() == "bye"
        assert await console.readline() is None
