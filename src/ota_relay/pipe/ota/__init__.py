"""
One-time-auth (OTA) chunk relay.

An OTA stream authenticates every record on its own with a truncated
HMAC-SHA1, rather than authenticating the stream as a whole. Wire format
and tag construction are in `chunk` and `crypto`; the verifying copy loop
is in `relay`.
"""

from .chunk import (
    DATA_LENGTH_SIZE,
    HEADER_SIZE,
    MAX_PAYLOAD_SIZE,
    TAG_SIZE,
    ChunkHeader,
    ChunkTag,
    encode_chunk,
)
from .crypto import chunk_key, compute_tag, verify_tag
from .relay import pipe_then_close_ota, read_full

__all__ = [
    # Framing
    "DATA_LENGTH_SIZE",
    "TAG_SIZE",
    "HEADER_SIZE",
    "MAX_PAYLOAD_SIZE",
    "ChunkHeader",
    "ChunkTag",
    "encode_chunk",
    # Authentication
    "chunk_key",
    "compute_tag",
    "verify_tag",
    # Relay
    "pipe_then_close_ota",
    "read_full",
]
