# tests/test_fan_out.py
"""
Stage fan-out / fan-in: partial failure, progress order, result order.
"""
import asyncio

import pytest

from council.orchestration.fan_out import run_stage, successful


@pytest.mark.asyncio
async def test_partial_failure_keeps_successes():
    """5 tasks, 2 produce nothing -> 3 results, 5 progress calls 1..5."""
    progress = []

    async def worker(task_id):
        await asyncio.sleep(0)
        return None if task_id in ("t2", "t4") else f"idea-{task_id}"

    results = await run_stage(
        ["t1", "t2", "t3", "t4", "t5"],
        worker,
        lambda done, total: progress.append((done, total)),
    )

    assert successful(results) == ["idea-t1", "idea-t3", "idea-t5"]
    assert progress == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]
    assert [r.task_id for r in results if not r.ok] == ["t2", "t4"]


@pytest.mark.asyncio
async def test_exceptions_do_not_cancel_siblings():
    finished = []

    async def worker(task_id):
        if task_id == "boom":
            raise RuntimeError("prompt missing")
        await asyncio.sleep(0.01)
        finished.append(task_id)
        return task_id

    results = await run_stage(["a", "boom", "b"], worker)

    assert sorted(finished) == ["a", "b"]
    failed = [r for r in results if not r.ok]
    assert len(failed) == 1
    assert "RuntimeError" in failed[0].error


@pytest.mark.asyncio
async def test_results_follow_configured_order_not_completion_order():
    completion = []
    delays = {"slow": 0.05, "medium": 0.02, "fast": 0.0}

    async def worker(task_id):
        await asyncio.sleep(delays[task_id])
        completion.append(task_id)
        return task_id

    results = await run_stage(["slow", "medium", "fast"], worker)

    assert completion == ["fast", "medium", "slow"]
    assert [r.task_id for r in results] == ["slow", "medium", "fast"]


@pytest.mark.asyncio
async def test_progress_reported_while_slow_task_runs():
    """A completed task is reported before a slow sibling settles."""
    seen = []
    release = asyncio.Event()

    async def worker(task_id):
        if task_id == "slow":
            await release.wait()
        return task_id

    def on_progress(done, total):
        seen.append(done)
        if done == 1:
            release.set()

    results = await run_stage(["slow", "quick"], worker, on_progress)

    assert seen == [1, 2]
    assert successful(results) == ["slow", "quick"]


@pytest.mark.asyncio
async def test_failing_progress_callback_is_ignored():
    def on_progress(done, total):
        raise ValueError("ui gone")

    async def worker(task_id):
        return task_id

    results = await run_stage(["a", "b"], worker, on_progress)
    assert successful(results) == ["a", "b"]


@pytest.mark.asyncio
async def test_empty_stage():
    async def worker(task_id):
        return task_id

    assert await run_stage([], worker) == []
