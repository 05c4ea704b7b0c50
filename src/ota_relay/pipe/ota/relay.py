"""
Authenticated chunk relay.

Reads OTA-framed chunks from an authenticated source, verifies each tag and
forwards only the payload. Any framing or authentication failure stops the
whole relay: once one tag fails, chunk boundaries downstream of it can no
longer be trusted, so there is no attempt to skip ahead or resynchronize.

Per chunk:

    1. Re-arm the inactivity deadline.
    2. Read the 12-byte header; parse length L and the received tag.
    3. Read L payload bytes into the pooled buffer, or into a dedicated
       buffer of exactly L bytes when the pooled one is too small.
    4. Take the next counter value, compute the expected tag, compare.
    5. Forward the payload on a match, stop on a mismatch.

The counter advances before the tag is checked, so a failing chunk still
consumes its counter value. Peers assign counter values the same way.
"""

from __future__ import annotations

import logging

from ...connection.types import AuthenticatedConnection, Connection
from ..deadline import set_read_timeout
from ..errors import (
    AuthenticationMismatch,
    CleanEndOfStream,
    MalformedHeader,
    RelayError,
    classify,
)
from ..pool import BufferPool
from ..relay import close_destination, log_termination
from .chunk import HEADER_SIZE, ChunkHeader
from .crypto import compute_tag, verify_tag

logger = logging.getLogger(__name__)


async def read_full(src: Connection, view: memoryview, section: str) -> None:
    """
    Fill `view` completely from `src`.

    Raises:
        CleanEndOfStream: If the source ended before any byte was read.
        MalformedHeader: If the source ended part way through.
        RelayTimeout: If the read deadline passed.
        TransportError: On any other read failure.
    """
    got = 0
    while got < len(view):
        try:
            n = await src.read_into(view[got:])
        except Exception as e:
            raise classify(e, operation="read") from e
        if n == 0:
            if got == 0:
                raise CleanEndOfStream()
            raise MalformedHeader(section, expected=len(view), actual=got)
        got += n


async def _relay_chunks(
    src: AuthenticatedConnection,
    dst: Connection,
    timeout: float,
    buf: bytearray,
) -> None:
    """Run the chunk loop until it raises the `RelayError` that ends it."""
    view = memoryview(buf)
    header_view = view[:HEADER_SIZE]
    while True:
        set_read_timeout(src, timeout)
        await read_full(src, header_view, "header")
        header = ChunkHeader.decode(header_view)
        length = int(header.length)

        # Pooled buffers are never resized; an oversized chunk gets its own.
        if len(buf) - HEADER_SIZE >= length:
            payload = view[HEADER_SIZE : HEADER_SIZE + length]
        else:
            payload = memoryview(bytearray(length))

        await read_full(src, payload, "payload")

        chunk_id = src.get_and_increment_chunk_id()
        expected = compute_tag(src.iv, chunk_id, payload)
        if not verify_tag(expected, header.tag):
            raise AuthenticationMismatch(
                chunk_id=int(chunk_id),
                length=length,
                expected=bytes(expected),
                received=bytes(header.tag),
                src_address=src.remote_address,
                dst_address=dst.remote_address,
            )

        try:
            await dst.write(payload)
        except Exception as e:
            raise classify(e, operation="write") from e


async def pipe_then_close_ota(
    src: AuthenticatedConnection,
    dst: Connection,
    timeout: float = 0.0,
    *,
    pool: BufferPool,
    log: logging.Logger | None = None,
) -> None:
    """
    Relay verified chunk payloads from `src` to `dst`, then close `dst`.

    Nothing is raised to the caller. End-of-stream on a chunk boundary is a
    normal finish; every other terminal condition is logged, the tag
    mismatch with the chunk counter, declared length, both tags and both
    endpoints. `dst` is closed exactly once and the pooled buffer returned
    on every exit path.

    Args:
        src: Authenticated connection carrying OTA chunks.
        dst: Connection receiving the verified payloads.
        timeout: Inactivity limit in seconds; zero disables it.
        pool: Shared buffer pool. Its buffers must hold at least a header.
        log: Logger override; defaults to this module's logger.
    """
    log = log or logger
    try:
        with pool.borrow() as buf:
            if len(buf) < HEADER_SIZE:
                raise ValueError(
                    f"Pool buffers of {len(buf)} bytes cannot hold a {HEADER_SIZE}-byte header"
                )
            try:
                await _relay_chunks(src, dst, timeout, buf)
            except RelayError as err:
                log_termination(log, err, src, dst)
    finally:
        await close_destination(dst, log)
