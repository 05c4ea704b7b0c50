"""
One-time-auth (OTA) connection state.

An OTA source stream is keyed by two values:

    - the initialization vector agreed during session setup, and
    - a 32-bit chunk counter that starts at zero and advances once per chunk
      header parsed from this connection.

Both peers derive the same counter sequence independently. It is never sent
on the wire, which is why the counter has to advance in lockstep with header
parsing even for a chunk that later fails verification.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from ..types import Uint32
from .types import Connection


class ChunkCounter:
    """
    Thread-safe 32-bit fetch-and-increment counter.

    A single relay task normally owns the reading side of a connection, but
    the counter lives on the connection object, so nothing stops a second
    reader from appearing. The lock keeps every returned value unique.
    """

    def __init__(self, start: Uint32 = Uint32(0)) -> None:
        self._value = start
        self._lock = threading.Lock()

    @property
    def value(self) -> Uint32:
        """Value the next `get_and_increment()` will return."""
        with self._lock:
            return self._value

    def get_and_increment(self) -> Uint32:
        """Return the current value and advance by one, wrapping at 2**32."""
        with self._lock:
            current = self._value
            self._value = current.wrapping_increment()
            return current


@dataclass(slots=True)
class OtaConnection:
    """
    A `Connection` whose inbound stream carries OTA-framed chunks.

    Delegates all I/O to `inner` and adds the IV and chunk counter, which is
    what `AuthenticatedConnection` asks for.

    Usage:
        conn = OtaConnection(StreamConnection(reader, writer), iv=session_iv)
    """

    inner: Connection
    """Transport the chunks are read from."""

    iv: bytes
    """Initialization vector fixed at session setup."""

    counter: ChunkCounter = field(default_factory=ChunkCounter)
    """Per-connection chunk counter."""

    def __post_init__(self) -> None:
        """Reject an empty IV; every chunk key is derived from it."""
        if not self.iv:
            raise ValueError("OTA connection requires a non-empty IV")
        self.iv = bytes(self.iv)

    @property
    def remote_address(self) -> str:
        """Peer address of the wrapped connection."""
        return self.inner.remote_address

    def get_and_increment_chunk_id(self) -> Uint32:
        """Atomically return the current chunk counter and advance it by one."""
        return self.counter.get_and_increment()

    async def read_into(self, buffer: memoryview) -> int:
        """Read from the wrapped connection."""
        return await self.inner.read_into(buffer)

    async def write(self, data: bytes | bytearray | memoryview) -> None:
        """Write to the wrapped connection."""
        await self.inner.write(data)

    async def close(self) -> None:
        """Close the wrapped connection."""
        await self.inner.close()

    def set_read_deadline(self, deadline: float | None) -> None:
        """Arm or clear the wrapped connection's read deadline."""
        self.inner.set_read_deadline(deadline)
