"""Tests for running both directions of a session."""

from __future__ import annotations

import asyncio

from ota_relay.connection import OtaConnection
from ota_relay.pipe.ota import encode_chunk
from ota_relay.pipe.pool import BufferPool
from ota_relay.pipe.session import relay_session, spawn_ota_pipe, spawn_pipe
from ota_relay.types import Uint32
from tests.ota_relay.helpers import TEST_IV, MockConnection, run_async


class ClosingPeer(MockConnection):
    """
    Connection whose reads fail once it has been closed.

    Models a real socket: closing it makes the reading task's next I/O
    fail, which is how one direction shuts down the other.
    """

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__(*args, **kwargs)  # type: ignore[arg-type]
        self._closed_event = asyncio.Event()

    async def read_into(self, buffer: memoryview) -> int:
        if self.pending:
            return await super().read_into(buffer)
        await self._closed_event.wait()
        self.read_calls += 1
        raise ConnectionAbortedError("use of closed connection")

    async def close(self) -> None:
        await super().close()
        self._closed_event.set()


class TestRelaySession:
    """Tests for relay_session()."""

    def test_plain_session_both_directions(self) -> None:
        client = MockConnection([b"request"], address="192.0.2.1:1")
        upstream = MockConnection([b"response"], address="192.0.2.2:2")

        run_async(relay_session(client, upstream, pool=BufferPool(buffer_size=64)))

        assert upstream.data == b"request"
        assert client.data == b"response"
        assert client.close_calls == 1
        assert upstream.close_calls == 1

    def test_authenticated_client_is_verified(self) -> None:
        inner = MockConnection([encode_chunk(TEST_IV, Uint32(0), b"request")])
        client = OtaConnection(inner, TEST_IV)
        upstream = MockConnection([b"response"])

        run_async(relay_session(client, upstream, pool=BufferPool(buffer_size=64)))

        assert upstream.data == b"request"
        assert inner.data == b"response"
        assert client.counter.value == 1

    def test_client_eof_tears_down_upstream_direction(self) -> None:
        """Closing upstream makes the upstream->client task fail and close the client."""
        client = MockConnection([b"bye"])
        upstream = ClosingPeer()

        async def run_test() -> None:
            await asyncio.wait_for(
                relay_session(client, upstream, pool=BufferPool(buffer_size=64)), timeout=5
            )

        run_async(run_test())

        assert upstream.data == b"bye"
        assert upstream.close_calls == 1
        assert client.close_calls == 1


class TestSpawn:
    """Tests for the detached spawn helpers."""

    def test_spawn_pipe_runs_in_background(self) -> None:
        src = MockConnection([b"data"])
        dst = MockConnection()

        async def run_test() -> str:
            task = spawn_pipe(src, dst, pool=BufferPool(buffer_size=64))
            await task
            return task.get_name()

        name = run_async(run_test())
        assert dst.data == b"data"
        assert dst.close_calls == 1
        assert name.startswith("pipe ")

    def test_spawn_ota_pipe_runs_in_background(self) -> None:
        src = OtaConnection(MockConnection([encode_chunk(TEST_IV, Uint32(0), b"x")]), TEST_IV)
        dst = MockConnection()

        async def run_test() -> None:
            await spawn_ota_pipe(src, dst, pool=BufferPool(buffer_size=64))

        run_async(run_test())
        assert dst.data == b"x"
        assert dst.close_calls == 1
