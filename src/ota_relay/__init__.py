"""
Data plane of an encrypted tunnel.

Relays bytes between two established connections, either transparently or
while verifying one-time-auth (OTA) chunk tags.

Usage:
    config = RelayConfig.from_env()
    pool = config.create_pool()
    await relay_session(client, upstream, pool=pool, timeout=config.read_timeout)
"""

from .config import RelayConfig
from .connection import (
    AuthenticatedConnection,
    ChunkCounter,
    Connection,
    OtaConnection,
    StreamConnection,
)
from .pipe import (
    BufferPool,
    RelayError,
    RelayErrorKind,
    pipe_then_close,
    pipe_then_close_ota,
    relay_session,
    spawn_ota_pipe,
    spawn_pipe,
)

__all__ = [
    "AuthenticatedConnection",
    "BufferPool",
    "ChunkCounter",
    "Connection",
    "OtaConnection",
    "RelayConfig",
    "RelayError",
    "RelayErrorKind",
    "StreamConnection",
    "pipe_then_close",
    "pipe_then_close_ota",
    "relay_session",
    "spawn_ota_pipe",
    "spawn_pipe",
]
