"""
Queue-backed channel of keyword state updates
"""

import asyncio
from typing import AsyncIterator

from tracker.models import KeywordUpdate

_CLOSED = object()


class UpdateChannel:
    """Async channel of KeywordUpdate messages

    publish() is safe to pass as an orchestrator's on_update callback.
    Iteration ends once close() has been called and the queue is drained.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    def publish(self, update: KeywordUpdate) -> None:
        if self._closed:
            raise RuntimeError("Channel is closed")
        self._queue.put_nowait(update)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aiter__(self) -> AsyncIterator[KeywordUpdate]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item
