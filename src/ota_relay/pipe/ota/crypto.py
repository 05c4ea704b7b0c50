"""
Chunk authentication for one-time-auth streams.

    key = iv || uint32_be(chunk_id)
    tag = HMAC-SHA1(key, payload)[:10]

Keying with the counter binds each tag to the chunk's position, so chunks
cannot be replayed, reordered or dropped without the next check failing.
"""

from __future__ import annotations

import hashlib
import hmac

from ...types import Uint32
from .chunk import TAG_SIZE, ChunkTag


def chunk_key(iv: bytes, chunk_id: Uint32) -> bytes:
    """HMAC key for one chunk: the IV followed by the big-endian counter."""
    return bytes(iv) + chunk_id.to_bytes(4, "big")


def compute_tag(iv: bytes, chunk_id: Uint32, payload: bytes | bytearray | memoryview) -> ChunkTag:
    """
    Compute the tag a sender attaches to `payload`.

    Args:
        iv: Session initialization vector.
        chunk_id: Counter value assigned to this chunk.
        payload: Chunk payload bytes.

    Returns:
        First 10 bytes of HMAC-SHA1 over the payload.
    """
    digest = hmac.new(chunk_key(iv, chunk_id), payload, hashlib.sha1).digest()
    return ChunkTag(digest[:TAG_SIZE])


def verify_tag(expected: bytes, received: bytes) -> bool:
    """Compare two tags without leaking the position of the first difference."""
    return hmac.compare_digest(bytes(expected), bytes(received))
