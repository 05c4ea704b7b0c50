"""Tests for the OTA connection wrapper and its chunk counter."""

from __future__ import annotations

import threading

import pytest

from ota_relay.connection import AuthenticatedConnection, ChunkCounter, OtaConnection
from ota_relay.types import Uint32
from tests.ota_relay.helpers import TEST_IV, MockConnection, run_async


class TestChunkCounter:
    """Tests for ChunkCounter."""

    def test_starts_at_zero(self) -> None:
        assert ChunkCounter().value == 0

    def test_get_and_increment_returns_previous_value(self) -> None:
        counter = ChunkCounter()
        assert counter.get_and_increment() == Uint32(0)
        assert counter.get_and_increment() == Uint32(1)
        assert counter.value == 2

    def test_wraps_at_32_bits(self) -> None:
        counter = ChunkCounter(Uint32.max_value())
        assert counter.get_and_increment() == Uint32.max_value()
        assert counter.value == 0

    def test_concurrent_increments_are_unique(self) -> None:
        """Every caller gets a distinct value and none are lost."""
        counter = ChunkCounter()
        seen: list[int] = []
        lock = threading.Lock()

        def worker() -> None:
            local = [int(counter.get_and_increment()) for _ in range(500)]
            with lock:
                seen.extend(local)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(seen) == list(range(4000))
        assert counter.value == 4000


class TestOtaConnection:
    """Tests for OtaConnection."""

    def test_is_authenticated_connection(self) -> None:
        conn = OtaConnection(MockConnection(), TEST_IV)
        assert isinstance(conn, AuthenticatedConnection)

    def test_plain_connection_is_not_authenticated(self) -> None:
        assert not isinstance(MockConnection(), AuthenticatedConnection)

    def test_empty_iv_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty IV"):
            OtaConnection(MockConnection(), b"")

    def test_iv_is_copied_to_bytes(self) -> None:
        iv = bytearray(TEST_IV)
        conn = OtaConnection(MockConnection(), iv)
        iv[0] ^= 0xFF
        assert conn.iv == TEST_IV

    def test_counter_is_per_connection(self) -> None:
        a = OtaConnection(MockConnection(), TEST_IV)
        b = OtaConnection(MockConnection(), TEST_IV)
        a.get_and_increment_chunk_id()
        assert a.counter.value == 1
        assert b.counter.value == 0

    def test_delegates_io(self) -> None:
        inner = MockConnection([b"abc"], address="192.0.2.5:99")
        conn = OtaConnection(inner, TEST_IV)

        async def run_test() -> bytes:
            buf = bytearray(8)
            n = await conn.read_into(memoryview(buf))
            await conn.write(b"out")
            conn.set_read_deadline(12.5)
            await conn.close()
            return bytes(buf[:n])

        assert run_async(run_test()) == b"abc"
        assert inner.written == [b"out"]
        assert inner.deadlines == [12.5]
        assert inner.close_calls == 1
        assert conn.remote_address == "192.0.2.5:99"
