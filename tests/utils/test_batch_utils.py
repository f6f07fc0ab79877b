#!/usr/bin/env python3
"""
Tests for batch_utils module

Tests chunking and the bounded-concurrency batch runner: ordering, window
sizes, and failure propagation.
"""

import asyncio

import pytest

from timetracking.utils.batch_utils import chunked, run_batched


class TestChunked:
    """Tests for chunked function."""

    def test_splits_into_fixed_size_chunks(self):
        """Test chunks have the requested size with a shorter remainder."""
        assert chunked([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]]

    def test_empty_input(self):
        """Test empty input gives no chunks."""
        assert chunked([], 200) == []

    def test_chunk_size_independent_of_total(self):
        """Test 450 ids at size 200 give 200/200/50."""
        assert [len(c) for c in chunked(list(range(450)), 200)] == [200, 200, 50]

    def test_invalid_size_raises(self):
        """Test non-positive size is rejected."""
        with pytest.raises(ValueError, match="Chunk size must be positive"):
            chunked([1], 0)


class TestRunBatched:
    """Tests for run_batched function."""

    @pytest.mark.asyncio
    async def test_preserves_input_order(self):
        """Test results follow input order even when later tasks finish first."""

        def task(value, delay):
            async def run():
                await asyncio.sleep(delay)
                return value

            return run

        results = await run_batched([task(1, 0.03), task(2, 0.01), task(3, 0.0)], concurrency=3)
        assert results == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_never_exceeds_concurrency(self):
        """Test at most `concurrency` tasks are in flight at once."""
        in_flight = 0
        peak = 0

        async def run():
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.005)
            in_flight -= 1
            return True

        results = await run_batched([run for _ in range(11)], concurrency=3)

        assert len(results) == 11
        assert peak == 3

    @pytest.mark.asyncio
    async def test_windows_run_sequentially(self):
        """Test the next window starts only after the previous one finished."""
        events = []

        def task(i):
            async def run():
                events.append(("start", i))
                await asyncio.sleep(0.001)
                events.append(("end", i))
                return i

            return run

        await run_batched([task(i) for i in range(4)], concurrency=2)

        first_window_end = max(events.index(("end", 0)), events.index(("end", 1)))
        assert events.index(("start", 2)) > first_window_end
        assert events.index(("start", 3)) > first_window_end

    @pytest.mark.asyncio
    async def test_empty_task_list(self):
        """Test no tasks gives an empty list."""
        assert await run_batched([], concurrency=5) == []

    @pytest.mark.asyncio
    async def test_failure_propagates_after_siblings_finish(self):
        """Test a failing task fails the call, siblings in its window complete, later windows never start."""
        completed = []

        def ok(i):
            async def run():
                await asyncio.sleep(0.005)
                completed.append(i)
                return i

            return run

        async def fail():
            raise PermissionError("denied")

        with pytest.raises(PermissionError, match="denied"):
            await run_batched([ok(0), fail, ok(2), ok(3)], concurrency=3)

        assert sorted(completed) == [0, 2]

    @pytest.mark.asyncio
    async def test_first_failure_in_input_order_is_raised(self):
        """Test that with two failures in a window the earlier task's error wins."""

        async def slow_fail():
            await asyncio.sleep(0.01)
            raise KeyError("first")

        async def fast_fail():
            raise ValueError("second")

        with pytest.raises(KeyError):
            await run_batched([slow_fail, fast_fail], concurrency=2)

    @pytest.mark.asyncio
    async def test_invalid_concurrency_raises(self):
        """Test non-positive concurrency is rejected."""
        with pytest.raises(ValueError, match="Concurrency must be positive"):
            await run_batched([], concurrency=0)
