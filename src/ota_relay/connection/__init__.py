"""
Connections consumed by the relay loops.

The relay core never opens sockets or negotiates ciphers. It works against
two small interfaces:

    - Connection: read into a buffer, write, close, read deadline, address.
    - AuthenticatedConnection: a Connection that also carries the OTA
      initialization vector and chunk counter.

StreamConnection adapts asyncio streams to the first; OtaConnection wraps any
Connection to provide the second.
"""

from .ota import ChunkCounter, OtaConnection
from .stream import StreamConnection, format_peername
from .types import AuthenticatedConnection, Connection

__all__ = [
    "AuthenticatedConnection",
    "ChunkCounter",
    "Connection",
    "OtaConnection",
    "StreamConnection",
    "format_peername",
]
