"""
Terminal conditions of a relay loop.

Every relay loop ends for exactly one reason. Instead of comparing raw
exceptions by identity ("is this the end-of-stream value?"), each reason is
a `RelayError` subclass tagged with a `RelayErrorKind`, and termination is
handled by dispatching on that kind.

None of these are retried. Reconnection is the session manager's business.
"""

from __future__ import annotations

import asyncio
from enum import Enum, auto


class RelayErrorKind(Enum):
    """Why a relay loop stopped."""

    CLEAN_END_OF_STREAM = auto()
    """Source reached end-of-stream on a record boundary. Normal shutdown."""

    TIMEOUT = auto()
    """No data arrived before the read deadline."""

    TRANSPORT_ERROR = auto()
    """A read or write on the underlying connection failed."""

    MALFORMED_HEADER = auto()
    """Stream ended part way through a chunk header or payload."""

    AUTHENTICATION_MISMATCH = auto()
    """A chunk tag did not verify. Framing can no longer be trusted."""


class RelayError(Exception):
    """
    Base class for all relay terminal conditions.

    Attributes:
        message: Human-readable description.
        kind: Tag used to dispatch termination handling.
    """

    kind: RelayErrorKind

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class CleanEndOfStream(RelayError):
    """Zero-byte terminal read."""

    kind = RelayErrorKind.CLEAN_END_OF_STREAM

    def __init__(self, message: str = "end of stream") -> None:
        super().__init__(message)


class RelayTimeout(RelayError):
    """Read deadline exceeded."""

    kind = RelayErrorKind.TIMEOUT

    def __init__(self, message: str = "read deadline exceeded") -> None:
        super().__init__(message)


class TransportError(RelayError):
    """
    Any read or write failure other than clean end-of-stream.

    Attributes:
        operation: "read" or "write".
        cause: The exception raised by the connection.
    """

    kind = RelayErrorKind.TRANSPORT_ERROR

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause!r}")


class MalformedHeader(RelayError):
    """
    Fewer bytes than a header or payload requires before end-of-stream.

    Attributes:
        section: "header" or "payload".
        expected: Bytes required.
        actual: Bytes received before the stream ended.
    """

    kind = RelayErrorKind.MALFORMED_HEADER

    def __init__(self, section: str, *, expected: int, actual: int) -> None:
        self.section = section
        self.expected = expected
        self.actual = actual
        super().__init__(f"short {section} read: expected {expected} bytes, got {actual}")


class AuthenticationMismatch(RelayError):
    """
    A chunk's received tag differs from the one computed locally.

    Carries the full diagnostic context so the log line alone is enough to
    investigate a tampered or desynchronized stream.
    """

    kind = RelayErrorKind.AUTHENTICATION_MISMATCH

    def __init__(
        self,
        *,
        chunk_id: int,
        length: int,
        expected: bytes,
        received: bytes,
        src_address: str,
        dst_address: str,
    ) -> None:
        self.chunk_id = chunk_id
        self.length = length
        self.expected = expected
        self.received = received
        self.src_address = src_address
        self.dst_address = dst_address
        super().__init__(
            f"chunk tag mismatch: chunk_id={chunk_id} len={length} "
            f"src={src_address} dst={dst_address} "
            f"expected={expected.hex()} received={received.hex()}"
        )


def classify(exc: BaseException, *, operation: str = "read") -> RelayError:
    """
    Map an exception raised by a connection to a tagged relay error.

    Args:
        exc: Exception raised during `operation`.
        operation: "read" or "write", recorded on transport errors.

    Returns:
        `exc` itself if it is already a `RelayError`, otherwise the
        matching subclass.
    """
    if isinstance(exc, RelayError):
        return exc
    # TimeoutError is an OSError subclass; check it first.
    if isinstance(exc, TimeoutError):
        return RelayTimeout()
    if isinstance(exc, asyncio.IncompleteReadError):
        if not exc.partial:
            return CleanEndOfStream()
        return MalformedHeader(
            operation,
            expected=exc.expected or 0,
            actual=len(exc.partial),
        )
    return TransportError(operation, exc)
