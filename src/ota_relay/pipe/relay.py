"""
Unauthenticated byte relay.

Copies everything read from one connection to another until the source
ends or fails, then closes the destination. The relay runs as a detached
task with no return channel: the only thing it reports is the destination's
closed state, which the paired task on the other half of the session sees
as an I/O error on its next read or write. That is how one direction
shutting down tears down the other.
"""

from __future__ import annotations

import logging

from ..connection.types import Connection
from .deadline import set_read_timeout
from .errors import CleanEndOfStream, RelayError, RelayErrorKind, classify
from .pool import BufferPool

logger = logging.getLogger(__name__)


def log_termination(
    log: logging.Logger, err: RelayError, src: Connection, dst: Connection
) -> None:
    """
    Record why a relay loop stopped, at a level matching the reason.

    End-of-stream is the normal way a relay finishes and is not reported as
    a failure. A tag mismatch is the security-relevant case and carries the
    full context already assembled in the error.
    """
    route = f"{src.remote_address} -> {dst.remote_address}"
    match err.kind:
        case RelayErrorKind.CLEAN_END_OF_STREAM:
            log.debug("relay %s finished: %s", route, err)
        case RelayErrorKind.TIMEOUT:
            log.info("relay %s idle timeout", route)
        case RelayErrorKind.AUTHENTICATION_MISMATCH:
            log.warning("relay %s aborted: %s", route, err)
        case RelayErrorKind.TRANSPORT_ERROR | RelayErrorKind.MALFORMED_HEADER:
            log.error("relay %s error: %s", route, err)


async def close_destination(dst: Connection, log: logging.Logger) -> None:
    """Close `dst`, logging rather than raising if the transport objects."""
    try:
        await dst.close()
    except Exception as e:
        log.debug("Error closing %s: %s", dst.remote_address, e)


async def pipe_then_close(
    src: Connection,
    dst: Connection,
    timeout: float = 0.0,
    *,
    pool: BufferPool,
    log: logging.Logger | None = None,
) -> None:
    """
    Copy bytes from `src` to `dst`, then close `dst`.

    Each iteration re-arms the inactivity deadline, reads once into a pooled
    buffer, and forwards exactly the bytes read. Bytes already read are
    always written before the loop looks at why the source stopped, so data
    arriving just ahead of end-of-stream is never dropped.

    Nothing is raised to the caller. Read and write failures are logged;
    `dst` is closed exactly once and the buffer returned to `pool` on every
    exit path.

    Args:
        src: Connection to read from.
        dst: Connection to write to and close.
        timeout: Inactivity limit in seconds; zero disables it.
        pool: Shared buffer pool.
        log: Logger override; defaults to this module's logger.
    """
    log = log or logger
    try:
        with pool.borrow() as buf:
            view = memoryview(buf)
            while True:
                set_read_timeout(src, timeout)
                try:
                    n = await src.read_into(view)
                except Exception as e:
                    log_termination(log, classify(e, operation="read"), src, dst)
                    break

                if n > 0:
                    try:
                        await dst.write(view[:n])
                    except Exception as e:
                        log_termination(log, classify(e, operation="write"), src, dst)
                        break

                if n == 0:
                    log_termination(log, CleanEndOfStream(), src, dst)
                    break
    finally:
        await close_destination(dst, log)
