import asyncio
from typing import AsyncIterator

import structlog

from pageviews.core.errors import StoreError
from pageviews.services.event_store import EventStore

logger = structlog.get_logger()


def format_frame(count: int) -> str:
    """Render one event-stream frame carrying the count"""
    return f"data: {count}\n\n"


class LiveCounter:
    """
    Polls the event store and renders the running count as stream frames.

    One instance is shared by every /live connection; each connection
    iterates its own ``stream()``. ``close()`` is the shutdown signal: it
    is checked before each store read and interrupts the wait between
    ticks, so open streams end promptly instead of on the next push.
    """

    def __init__(self, store: EventStore, interval: float = 2.0):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.store = store
        self.interval = interval
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def close(self) -> None:
        self._closed.set()

    async def _wait_for_close(self) -> bool:
        """Sleep one interval; True if close() was called meanwhile"""
        try:
            await asyncio.wait_for(self._closed.wait(), timeout=self.interval)
            return True
        except asyncio.TimeoutError:
            return False

    async def stream(self) -> AsyncIterator[str]:
        frames = 0
        logger.info("live_stream_opened", interval=self.interval)

        try:
            while not self.closed:
                try:
                    count = await self.store.count_pageviews()
                except StoreError as e:
                    # Ends this connection only
                    logger.error("live_count_failed", error=str(e), frames=frames)
                    return

                yield format_frame(count)
                frames += 1

                if await self._wait_for_close():
                    return
        finally:
            logger.info("live_stream_closed", frames=frames)
