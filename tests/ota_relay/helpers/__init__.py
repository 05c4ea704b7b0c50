"""Test helpers for relay unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .mocks import MockConnection, MockStreamWriter

TEST_IV = bytes(range(16))
"""Fixed 16-byte initialization vector."""


_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    # Mocks
    "MockConnection",
    "MockStreamWriter",
    # Constants
    "TEST_IV",
    # Async utilities
    "run_async",
]
