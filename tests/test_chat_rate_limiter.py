import asyncio
import time

import pytest

from modbot.rate.rate_limiter import ChatRateLimiter


class RecordingSink:
    def __init__(self) -> None:
        self.sent: list[tuple[float, str]] = []

    async def __call__(self, text: str) -> None:
        self.sent.append((time.monotonic(), text))


@pytest.mark.asyncio
async def test_first_send_is_immediate():
    limiter = ChatRateLimiter(min_interval=5)
    sink = RecordingSink()
    start = time.monotonic()
    assert await limiter.send("hi", sink) is True
    assert time.monotonic() - start < 0.05
    assert [t for _, t in sink.sent] == ["hi"]
    assert limiter.last_send_at is not None


@pytest.mark.asyncio
async def test_empty_text_is_noop():
    limiter = ChatRateLimiter(min_interval=5)
    sink = RecordingSink()
    assert await limiter.send("", sink) is False
    assert sink.sent == []
    assert limiter.last_send_at is None
    assert limiter.sent_count == 0


@pytest.mark.asyncio
async def test_second_send_waits_for_cooldown():
    interval = 0.05
    limiter = ChatRateLimiter(min_interval=interval)
    sink = RecordingSink()
    await limiter.send("a", sink)
    await limiter.send("b", sink)
    gap = sink.sent[1][0] - sink.sent[0][0]
    assert gap >= interval - 0.002


@pytest.mark.asyncio
async def test_concurrent_senders_keep_order_and_spacing():
    interval = 0.03
    limiter = ChatRateLimiter(min_interval=interval)
    sink = RecordingSink()
    texts = [f"msg-{i}" for i in range(6)]

    tasks = []
    for text in texts:
        tasks.append(asyncio.create_task(limiter.send(text, sink)))
        await asyncio.sleep(0)  # fix submission order
    results = await asyncio.gather(*tasks)

    assert all(results)
    assert [t for _, t in sink.sent] == texts
    stamps = [s for s, _ in sink.sent]
    gaps = [b - a for a, b in zip(stamps, stamps[1:], strict=False)]
    assert min(gaps) >= interval - 0.002
    assert limiter.sent_count == len(texts)


@pytest.mark.asyncio
async def test_failed_sink_does_not_record_send():
    limiter = ChatRateLimiter(min_interval=10)

    async def broken(_text: str) -> None:
        raise ConnectionError("gone")

    with pytest.raises(ConnectionError):
        await limiter.send("x", broken)
    assert limiter.last_send_at is None
    assert limiter.cooldown_remaining() == 0.0


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_block_others():
    interval = 0.05
    limiter = ChatRateLimiter(min_interval=interval)
    sink = RecordingSink()
    await limiter.send("first", sink)

    waiting = asyncio.create_task(limiter.send("cancelled", sink))
    await asyncio.sleep(0.01)
    waiting.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiting

    await limiter.send("after", sink)
    assert [t for _, t in sink.sent] == ["first", "after"]


def test_snapshot_reports_state():
    limiter = ChatRateLimiter(min_interval=3)
    snap = limiter.snapshot()
    assert snap["min_interval"] == 3
    assert snap["last_send_at"] is None
    assert snap["cooldown_remaining"] == 0.0
    assert snap["locked"] is False
