"""
Tests for the concurrent fan-out primitive.
"""

import asyncio
import time

import pytest

from meshprobe.tester import run_all


async def fail_placeholder(target: str, error: Exception) -> str:
    return f"{target}:failed:{type(error).__name__}"


class TestRunAll:

    @pytest.mark.asyncio
    async def test_empty_targets(self) -> None:
        async def probe(target: str) -> str:
            return target

        assert await run_all([], probe, fail_placeholder) == []

    @pytest.mark.asyncio
    async def test_results_map_one_to_one(self) -> None:
        async def probe(target: str) -> str:
            return target.upper()

        results = await run_all(["a", "b", "c"], probe, fail_placeholder)

        assert results == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_errors_become_placeholders(self) -> None:
        async def probe(target: str) -> str:
            if target == "b":
                raise ValueError("boom")
            return target

        results = await run_all(["a", "b", "c"], probe, fail_placeholder)

        assert results == ["a", "b:failed:ValueError", "c"]

    @pytest.mark.asyncio
    async def test_runs_concurrently(self) -> None:
        async def probe(target: float) -> float:
            await asyncio.sleep(target)
            return target

        start = time.perf_counter()
        results = await run_all([0.2, 0.2, 0.2, 0.2, 0.2], probe, fail_placeholder)
        elapsed = time.perf_counter() - start

        assert len(results) == 5
        assert elapsed < 0.6

    @pytest.mark.asyncio
    async def test_slow_failure_does_not_block_others(self) -> None:
        finished: list[str] = []

        async def probe(target: str) -> str:
            if target == "slow":
                await asyncio.sleep(0.2)
                raise TimeoutError("slow peer")

            finished.append(target)
            return target

        results = await run_all(["slow", "a", "b"], probe, fail_placeholder)

        assert finished == ["a", "b"]
        assert results[0] == "slow:failed:TimeoutError"

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self) -> None:
        async def probe(target: str) -> str:
            await asyncio.sleep(10)
            return target

        task = asyncio.create_task(run_all(["a", "b"], probe, fail_placeholder))
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
