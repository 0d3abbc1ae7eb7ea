import asyncio

import pytest

from pageviews.core.errors import StoreError
from pageviews.services.live import LiveCounter, format_frame


class FailingStore:
    """Store whose count query always fails"""

    def __init__(self):
        self.calls = 0

    async def count_pageviews(self) -> int:
        self.calls += 1
        raise StoreError("database is locked")


def test_format_frame():
    assert format_frame(0) == "data: 0\n\n"
    assert format_frame(1234) == "data: 1234\n\n"


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        LiveCounter(FailingStore(), interval=0)


@pytest.mark.asyncio
async def test_stream_reports_running_count(store):
    live = LiveCounter(store, interval=0.01)
    stream = live.stream()

    assert await stream.__anext__() == "data: 0\n\n"

    await store.record_pageview("/home")
    assert await stream.__anext__() == "data: 1\n\n"

    await stream.aclose()


@pytest.mark.asyncio
async def test_stream_counts_never_decrease(store):
    live = LiveCounter(store, interval=0.01)
    stream = live.stream()
    seen = []

    for i in range(5):
        frame = await stream.__anext__()
        seen.append(int(frame[len("data: "):].strip()))
        await store.record_pageview(f"/page/{i}")

    await stream.aclose()

    assert seen[0] == 0
    assert seen == sorted(seen)
    assert seen[-1] >= 4


@pytest.mark.asyncio
async def test_close_ends_stream_during_wait(store):
    """close() interrupts the sleep between ticks"""
    live = LiveCounter(store, interval=60)
    frames = []

    async def consume():
        async for frame in live.stream():
            frames.append(frame)

    task = asyncio.create_task(consume())
    await asyncio.sleep(0.1)
    live.close()

    await asyncio.wait_for(task, timeout=2)
    assert frames == ["data: 0\n\n"]


@pytest.mark.asyncio
async def test_closed_counter_emits_nothing(store):
    live = LiveCounter(store, interval=0.01)
    live.close()

    frames = [frame async for frame in live.stream()]

    assert frames == []
    assert live.closed


@pytest.mark.asyncio
async def test_store_failure_ends_stream_quietly():
    failing = FailingStore()
    live = LiveCounter(failing, interval=0.01)

    frames = [frame async for frame in live.stream()]

    assert frames == []
    assert failing.calls == 1
