"""Tests for the sliding read deadline."""

from __future__ import annotations

import asyncio

import pytest

from ota_relay.pipe.deadline import set_read_timeout
from tests.ota_relay.helpers import MockConnection, run_async


class TestSetReadTimeout:
    """Tests for set_read_timeout()."""

    def test_zero_timeout_never_sets_deadline(self) -> None:
        conn = MockConnection()

        async def run_test() -> None:
            set_read_timeout(conn, 0)

        run_async(run_test())
        assert conn.deadlines == []

    def test_positive_timeout_sets_now_plus_timeout(self) -> None:
        conn = MockConnection()

        async def run_test() -> tuple[float, float]:
            loop = asyncio.get_running_loop()
            before = loop.time()
            set_read_timeout(conn, 5.0)
            return before, loop.time()

        before, after = run_async(run_test())
        assert len(conn.deadlines) == 1
        deadline = conn.deadlines[0]
        assert deadline is not None
        assert before + 5.0 <= deadline <= after + 5.0

    def test_each_call_slides_the_deadline(self) -> None:
        conn = MockConnection()

        async def run_test() -> None:
            set_read_timeout(conn, 1.0)
            await asyncio.sleep(0.01)
            set_read_timeout(conn, 1.0)

        run_async(run_test())
        first, second = conn.deadlines
        assert first is not None and second is not None
        assert second > first

    def test_negative_timeout_rejected(self) -> None:
        conn = MockConnection()

        async def run_test() -> None:
            set_read_timeout(conn, -1)

        with pytest.raises(ValueError, match="non-negative"):
            run_async(run_test())
        assert conn.deadlines == []
