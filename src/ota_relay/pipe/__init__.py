"""
Relay loops for the tunnel data plane.

Components, leaf-first:
    - pool:     leaky pool of fixed-size buffers shared by all relay tasks
    - deadline: sliding inactivity timeout re-armed before every read
    - relay:    plain byte copy loop
    - ota/:     per-chunk HMAC-verified copy loop
    - session:  both directions of one proxied session

Every relay loop is a coroutine that returns None and never raises for I/O
failures. Its observable outcome is the destination connection being
closed, exactly once.
"""

from .deadline import set_read_timeout
from .errors import (
    AuthenticationMismatch,
    CleanEndOfStream,
    MalformedHeader,
    RelayError,
    RelayErrorKind,
    RelayTimeout,
    TransportError,
    classify,
)
from .ota import encode_chunk, pipe_then_close_ota
from .pool import LEAKY_BUFFER_SIZE, MAX_POOLED_BUFFERS, BufferPool
from .relay import pipe_then_close
from .session import relay_session, spawn_ota_pipe, spawn_pipe

__all__ = [
    # Buffers
    "BufferPool",
    "LEAKY_BUFFER_SIZE",
    "MAX_POOLED_BUFFERS",
    # Deadline
    "set_read_timeout",
    # Relays
    "pipe_then_close",
    "pipe_then_close_ota",
    "encode_chunk",
    "relay_session",
    "spawn_pipe",
    "spawn_ota_pipe",
    # Errors
    "RelayError",
    "RelayErrorKind",
    "CleanEndOfStream",
    "RelayTimeout",
    "TransportError",
    "MalformedHeader",
    "AuthenticationMismatch",
    "classify",
]
