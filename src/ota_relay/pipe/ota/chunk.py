"""
OTA chunk framing.

Each chunk on an OTA stream is laid out big-endian as:

    [length: 2 bytes][tag: 10 bytes][payload: length bytes]

The tag is a truncated HMAC-SHA1 over the payload, keyed by the session IV
followed by the 4-byte chunk counter (see `crypto`). The counter is implicit:
both ends count chunks independently, so chunks must be processed strictly
in order and none may be skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, TypeAlias

from ...types import Bytes10, Uint16, Uint32
from ..errors import MalformedHeader

DATA_LENGTH_SIZE: Final[int] = 2
"""Size of the big-endian payload length prefix."""

TAG_SIZE: Final[int] = 10
"""Size of the truncated HMAC-SHA1 tag."""

HEADER_SIZE: Final[int] = DATA_LENGTH_SIZE + TAG_SIZE
"""Bytes preceding every payload (12)."""

MAX_PAYLOAD_SIZE: Final[int] = 0xFFFF
"""Largest payload a 2-byte length prefix can describe."""

ChunkTag: TypeAlias = Bytes10
"""10-byte truncated HMAC-SHA1 authentication tag."""


@dataclass(frozen=True, slots=True)
class ChunkHeader:
    """Parsed 12-byte chunk header."""

    length: Uint16
    """Declared payload length."""

    tag: ChunkTag
    """Tag the sender computed over the payload."""

    @classmethod
    def decode(cls, data: bytes | bytearray | memoryview) -> ChunkHeader:
        """
        Parse a chunk header.

        Raises:
            MalformedHeader: If `data` is not exactly `HEADER_SIZE` bytes.
        """
        if len(data) != HEADER_SIZE:
            raise MalformedHeader("header", expected=HEADER_SIZE, actual=len(data))
        raw = bytes(data)
        return cls(
            length=Uint16.decode_bytes(raw[:DATA_LENGTH_SIZE]),
            tag=ChunkTag(raw[DATA_LENGTH_SIZE:HEADER_SIZE]),
        )

    def encode(self) -> bytes:
        """Serialize back to the 12-byte wire form."""
        return self.length.to_bytes() + bytes(self.tag)


def encode_chunk(iv: bytes, chunk_id: Uint32, payload: bytes) -> bytes:
    """
    Frame `payload` as the chunk a sender emits for counter value `chunk_id`.

    Raises:
        ValueError: If the payload does not fit a 2-byte length.
    """
    from .crypto import compute_tag

    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(f"Chunk payload too large: {len(payload)} > {MAX_PAYLOAD_SIZE}")

    header = ChunkHeader(length=Uint16(len(payload)), tag=compute_tag(iv, chunk_id, payload))
    return header.encode() + payload
