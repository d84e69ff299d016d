"""A byte-budget limiter that applies backpressure when capacity is exhausted."""

from __future__ import annotations

import asyncio
import contextlib
from collections import deque


class BufferAllocationPermit:
    """Holds ``size`` units of a limiter's capacity until released."""

    def __init__(self, limiter: "BufferLimiter", size: int) -> None:
        self._limiter = limiter
        self.size = size
        self._released = False

    def release(self) -> None:
        """Return the held capacity; calling it again does nothing."""
        if not self._released:
            self._released = True
            self._limiter._release(self.size)

    def __enter__(self) -> "BufferAllocationPermit":
        return self

    def __exit__(self, *args) -> None:
        self.release()


class BufferLimiter:
    """A fair, multi-unit semaphore over a fixed capacity in bytes."""

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.capacity = capacity
        self._available = capacity
        self._waiters: deque[tuple[int, asyncio.Future]] = deque()

    def __repr__(self) -> str:
        return f"BufferLimiter(capacity={self.capacity})"

    async def allocate(self, size: int) -> BufferAllocationPermit:
        """Wait until ``size`` bytes are free and reserve them."""
        if size > self.capacity:
            raise ValueError(
                "The overall size of the allocation exceeds the maximum capacity"
            )
        if not self._waiters and self._available >= size:
            self._available -= size
            return BufferAllocationPermit(self, size)

        fut = asyncio.get_running_loop().create_future()
        entry = (size, fut)
        self._waiters.append(entry)
        try:
            await fut
        except asyncio.CancelledError:
            if fut.done() and not fut.cancelled():
                self._release(size)
            else:
                with contextlib.suppress(ValueError):
                    self._waiters.remove(entry)
                self._wake()
            raise
        return BufferAllocationPermit(self, size)

    def _release(self, size: int) -> None:
        self._available += size
        self._wake()

    def _wake(self) -> None:
        while self._waiters:
            size, fut = self._waiters[0]
            if fut.done():
                self._waiters.popleft()
                continue
            if size > self._available:
                break
            self._waiters.popleft()
            self._available -= size
            fut.set_result(None)