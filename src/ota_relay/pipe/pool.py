"""
Leaky pool of fixed-size relay buffers.

Every relay task holds one buffer for as long as it runs. With thousands of
concurrent sessions, allocating a fresh buffer per task churns memory, so
buffers are recycled through a pool shared by all tasks.

The pool is "leaky": it keeps at most `max_buffers` idle buffers. Releasing
into a full pool drops the buffer for the garbage collector, and acquiring
from an empty pool allocates. It never blocks.

The pool is an explicit object. The session manager builds one at startup
and passes it to every relay call.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final

LEAKY_BUFFER_SIZE: Final[int] = 4108
"""Default buffer size: 2-byte length + 10-byte tag + 4096 bytes of payload."""

MAX_POOLED_BUFFERS: Final[int] = 2048
"""Default cap on idle buffers kept by the pool."""


class BufferPool:
    """
    Thread-safe pool of equally sized `bytearray` buffers.

    There is no ordering or fairness guarantee on which idle buffer is
    handed out. A buffer is owned by exactly one caller between `acquire()`
    and `release()`.

    Usage:
        pool = BufferPool()
        with pool.borrow() as buf:
            n = await conn.read_into(memoryview(buf))
    """

    def __init__(
        self,
        buffer_size: int = LEAKY_BUFFER_SIZE,
        max_buffers: int = MAX_POOLED_BUFFERS,
    ) -> None:
        if buffer_size <= 0:
            raise ValueError(f"Buffer size must be positive, got {buffer_size}")
        if max_buffers <= 0:
            raise ValueError(f"Pool capacity must be positive, got {max_buffers}")
        self._buffer_size = buffer_size
        self._max_buffers = max_buffers
        self._free: list[bytearray] = []
        self._lock = threading.Lock()

    @property
    def buffer_size(self) -> int:
        """Capacity of every buffer this pool hands out."""
        return self._buffer_size

    @property
    def max_buffers(self) -> int:
        """Maximum number of idle buffers retained."""
        return self._max_buffers

    @property
    def idle(self) -> int:
        """Number of idle buffers currently held."""
        with self._lock:
            return len(self._free)

    def acquire(self) -> bytearray:
        """Take an idle buffer, or allocate one if none is available."""
        with self._lock:
            if self._free:
                return self._free.pop()
        return bytearray(self._buffer_size)

    def release(self, buffer: bytearray) -> None:
        """
        Return `buffer` for reuse.

        Raises:
            ValueError: If `buffer` is not this pool's size. Dedicated
                oversized chunk buffers must never be released here.
        """
        if len(buffer) != self._buffer_size:
            raise ValueError(
                f"Invalid buffer size: expected {self._buffer_size}, got {len(buffer)}"
            )
        with self._lock:
            if len(self._free) < self._max_buffers:
                self._free.append(buffer)

    @contextmanager
    def borrow(self) -> Iterator[bytearray]:
        """Acquire a buffer for the duration of a `with` block."""
        buffer = self.acquire()
        try:
            yield buffer
        finally:
            self.release(buffer)
