"""
Running both directions of a proxied session.

A session is two independent relay tasks over the same pair of connections:

    client --(OTA chunks or plain bytes)--> upstream
    upstream --(plain bytes)--> client

There is no cancellation between them. When one direction stops it closes
its destination, and the other direction fails on its next I/O against that
connection, closes its own destination, and stops too. That cooperative
shutdown is the only coordination the two tasks need.
"""

from __future__ import annotations

import asyncio
import logging

from ..connection.types import AuthenticatedConnection, Connection
from .ota import pipe_then_close_ota
from .pool import BufferPool
from .relay import pipe_then_close

logger = logging.getLogger(__name__)

_background_tasks: set[asyncio.Task[None]] = set()
"""Strong references to detached relay tasks until they finish."""


def _detach(task: asyncio.Task[None]) -> asyncio.Task[None]:
    """Keep `task` alive until done; the event loop only holds weak references."""
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task


def spawn_pipe(
    src: Connection,
    dst: Connection,
    timeout: float = 0.0,
    *,
    pool: BufferPool,
    log: logging.Logger | None = None,
) -> asyncio.Task[None]:
    """
    Start a detached byte relay from `src` to `dst`.

    Fire-and-forget: the task never raises for I/O failures, and its only
    observable outcome is `dst` being closed.
    """
    coro = pipe_then_close(src, dst, timeout, pool=pool, log=log)
    name = f"pipe {src.remote_address} -> {dst.remote_address}"
    return _detach(asyncio.create_task(coro, name=name))


def spawn_ota_pipe(
    src: AuthenticatedConnection,
    dst: Connection,
    timeout: float = 0.0,
    *,
    pool: BufferPool,
    log: logging.Logger | None = None,
) -> asyncio.Task[None]:
    """Start a detached authenticated chunk relay from `src` to `dst`."""
    coro = pipe_then_close_ota(src, dst, timeout, pool=pool, log=log)
    name = f"ota pipe {src.remote_address} -> {dst.remote_address}"
    return _detach(asyncio.create_task(coro, name=name))


async def relay_session(
    client: Connection,
    upstream: Connection,
    *,
    pool: BufferPool,
    timeout: float = 0.0,
    log: logging.Logger | None = None,
) -> None:
    """
    Relay a session in both directions and return once both have stopped.

    The client-to-upstream direction verifies OTA chunks when `client` is an
    `AuthenticatedConnection`; the reverse direction is always a plain byte
    relay.

    Args:
        client: Connection from the tunnel client.
        upstream: Connection to the target server.
        pool: Shared buffer pool.
        timeout: Inactivity limit in seconds applied to every read.
        log: Logger override passed to both relays.
    """
    log = log or logger
    log.debug("Relaying session %s <-> %s", client.remote_address, upstream.remote_address)

    async with asyncio.TaskGroup() as tg:
        if isinstance(client, AuthenticatedConnection):
            tg.create_task(
                pipe_then_close_ota(client, upstream, timeout, pool=pool, log=log),
                name=f"ota pipe {client.remote_address} -> {upstream.remote_address}",
            )
        else:
            tg.create_task(
                pipe_then_close(client, upstream, timeout, pool=pool, log=log),
                name=f"pipe {client.remote_address} -> {upstream.remote_address}",
            )
        tg.create_task(
            pipe_then_close(upstream, client, timeout, pool=pool, log=log),
            name=f"pipe {upstream.remote_address} -> {client.remote_address}",
        )

    log.debug("Session %s <-> %s closed", client.remote_address, upstream.remote_address)
