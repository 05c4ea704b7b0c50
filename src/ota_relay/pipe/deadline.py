"""
Sliding inactivity deadline applied before each read.

The deadline is pushed forward every time a relay loop is about to read, so
a stream that keeps trickling data never times out. It is an inactivity
limit, not a cap on total transfer time.
"""

from __future__ import annotations

import asyncio

from ..connection.types import Connection


def set_read_timeout(conn: Connection, timeout: float) -> None:
    """
    Arm `conn`'s read deadline at "now + timeout".

    Args:
        conn: Connection about to be read.
        timeout: Inactivity limit in seconds. Zero disables the deadline and
            leaves `conn` untouched, so reads may block indefinitely.

    Raises:
        ValueError: If `timeout` is negative.
    """
    if timeout < 0:
        raise ValueError(f"Read timeout must be non-negative, got {timeout}")
    if timeout == 0:
        return
    conn.set_read_deadline(asyncio.get_running_loop().time() + timeout)
