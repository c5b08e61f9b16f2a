"""
Bounded single-producer/single-consumer channel for commit records.

End-of-stream is signalled with ``close()``. Consumers iterate with
``async for``; iteration ends once every published record has been
delivered and the channel is closed.
"""

import asyncio
import logging
from typing import AsyncIterator

from shared.exceptions import ChannelClosedError
from shared.models import CommitRecord

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 1000


class _EndOfStream:
    """Private end marker; never equal to a published record."""

    def __repr__(self):
        return "<end-of-stream>"


_END = _EndOfStream()


class CommitChannel:
    """FIFO channel of ``CommitRecord`` with bounded capacity."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("Channel capacity must be at least 1")
        self.capacity = capacity
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=capacity)
        self._closed = False
        self._drained = False
        self.published = 0
        self.delivered = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def drained(self) -> bool:
        """True once the consumer has observed end-of-stream."""
        return self._drained

    def qsize(self) -> int:
        return self._queue.qsize()

    async def publish(self, record: CommitRecord) -> None:
        """Append a record, suspending while the channel is full."""
        if self._closed:
            raise ChannelClosedError("Cannot publish to a closed channel")
        await self._queue.put(record)
        self.published += 1

    async def close(self) -> None:
        """Signal end-of-stream. Closing an already closed channel does nothing."""
        if self._closed:
            return
        self._closed = True
        await self._queue.put(_END)
        logger.debug("Commit channel closed after %d records", self.published)

    def __aiter__(self) -> AsyncIterator[CommitRecord]:
        return self._iterate()

    async def _iterate(self):
        while not self._drained:
            item = await self._queue.get()
            if item is _END:
                self._drained = True
                return
            self.delivered += 1
            yield item
