"""
Abstract interfaces for the connections a relay reads and writes.

These Protocol classes describe the capabilities the relay loops need and
nothing more. Session setup, ciphers and address parsing live elsewhere;
whatever object they produce only has to satisfy one of these shapes.

The runtime_checkable decorator allows isinstance() checks, which the
session uses to pick the authenticated relay for OTA-enabled sources.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..types import Uint32


@runtime_checkable
class Connection(Protocol):
    """
    A duplex byte-stream endpoint.

    One relay task reads it while the paired task writes to it, so a single
    connection is shared by both directions of a session.
    """

    @property
    def remote_address(self) -> str:
        """Peer address for diagnostics, e.g. "203.0.113.7:8388"."""
        ...

    async def read_into(self, buffer: memoryview) -> int:
        """
        Read up to `len(buffer)` bytes into `buffer`.

        Returns:
            Number of bytes stored at the front of `buffer`. Zero means the
            peer finished sending (clean end-of-stream).

        Raises:
            TimeoutError: If the read deadline passed before data arrived.
            OSError: If the transport failed.
        """
        ...

    async def write(self, data: bytes | bytearray | memoryview) -> None:
        """
        Write all of `data`.

        Raises:
            OSError: If the transport failed or the connection is closed.
        """
        ...

    async def close(self) -> None:
        """Close the connection. Pending I/O on it fails from now on."""
        ...

    def set_read_deadline(self, deadline: float | None) -> None:
        """
        Set the absolute event-loop time after which reads time out.

        None clears the deadline.
        """
        ...


@runtime_checkable
class AuthenticatedConnection(Connection, Protocol):
    """
    A connection whose inbound stream is framed as OTA chunks.

    Adds the per-session initialization vector and the chunk counter used
    to key every chunk's tag.
    """

    @property
    def iv(self) -> bytes:
        """Initialization vector fixed at session setup."""
        ...

    def get_and_increment_chunk_id(self) -> Uint32:
        """Atomically return the current chunk counter and advance it by one."""
        ...
