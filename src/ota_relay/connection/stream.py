"""
Connection adapter over asyncio streams.

asyncio's StreamReader has no read deadline of its own. The adapter keeps
the deadline as an absolute event-loop time and wraps every read in
`asyncio.timeout_at`, which gives the same semantics as a socket read
deadline: once armed it stays armed until moved or cleared.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


def format_peername(peername: object) -> str:
    """Render a socket peername tuple as "host:port"."""
    if isinstance(peername, tuple) and len(peername) >= 2:
        host, port = peername[0], peername[1]
        if ":" in str(host):
            return f"[{host}]:{port}"
        return f"{host}:{port}"
    if peername:
        return str(peername)
    return "unknown"


@dataclass(slots=True)
class StreamConnection:
    """
    A `Connection` backed by an asyncio reader/writer pair.

    Usage:
        reader, writer = await asyncio.open_connection(host, port)
        conn = StreamConnection(reader, writer)
    """

    reader: asyncio.StreamReader
    """Underlying TCP read stream."""

    writer: asyncio.StreamWriter
    """Underlying TCP write stream."""

    _deadline: float | None = field(default=None, repr=False)
    """Absolute loop time after which reads time out, or None."""

    _closed: bool = field(default=False, repr=False)
    """Whether close() has run."""

    @property
    def remote_address(self) -> str:
        """Peer address from the writer's transport."""
        return format_peername(self.writer.get_extra_info("peername"))

    @property
    def is_closed(self) -> bool:
        """Check if the connection has been closed."""
        return self._closed

    def set_read_deadline(self, deadline: float | None) -> None:
        """Arm or clear the read deadline (absolute event-loop time)."""
        self._deadline = deadline

    async def read_into(self, buffer: memoryview) -> int:
        """
        Read up to `len(buffer)` bytes into `buffer`.

        Returns:
            Bytes read; zero on end-of-stream.

        Raises:
            TimeoutError: If the deadline passes first.
            ConnectionError: If the connection was closed locally.
        """
        if self._closed:
            raise ConnectionError("Connection is closed")

        if self._deadline is None:
            data = await self.reader.read(len(buffer))
        else:
            async with asyncio.timeout_at(self._deadline):
                data = await self.reader.read(len(buffer))

        n = len(data)
        buffer[:n] = data
        return n

    async def write(self, data: bytes | bytearray | memoryview) -> None:
        """
        Write `data` and wait for the transport to accept it.

        Raises:
            ConnectionError: If the connection is closed or the peer went away.
        """
        if self._closed:
            raise ConnectionError("Connection is closed")
        # The writer may buffer asynchronously; hand it an immutable copy so
        # the caller can reuse its buffer right away.
        self.writer.write(bytes(data))
        await self.writer.drain()

    async def close(self) -> None:
        """
        Close the underlying transport.

        Safe to call more than once. Errors raised while the transport shuts
        down are expected when the peer already went away, so they are only
        logged.
        """
        if self._closed:
            return

        self._closed = True
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug("Error closing %s: %s", self.remote_address, e)
