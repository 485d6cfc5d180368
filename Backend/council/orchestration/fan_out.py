# council/orchestration/fan_out.py
"""
Stage fan-out / fan-in.

Every task identifier gets its own asyncio task. Each task pushes exactly
one settled StageTaskResult onto a shared queue; the coordinator drains
exactly N results, reporting progress in completion order, then returns
the results in configured identifier order. Siblings are never cancelled.
"""
import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar

from council.core.logging import log
from council.core.types import StageTaskResult


T = TypeVar("T")

Worker = Callable[[str], Awaitable[Optional[T]]]
ProgressCallback = Callable[[int, int], None]


async def _settle(task_id: str, worker: Worker, channel: "asyncio.Queue[StageTaskResult]") -> None:
    try:
        value = await worker(task_id)
        result = StageTaskResult(task_id=task_id, value=value,
                                 error=None if value is not None else "no usable output")
    except Exception as e:
        result = StageTaskResult(task_id=task_id, error=f"{type(e).__name__}: {e}")
    await channel.put(result)


async def run_stage(
    task_ids: Sequence[str],
    worker: Worker,
    on_progress: Optional[ProgressCallback] = None,
    scope: str = "COUNCIL",
    run_id: Optional[str] = None,
) -> List[StageTaskResult]:
    """
    Run worker(task_id) for every id concurrently and wait for all of them.

    Args:
        task_ids: Configured task identifiers (their order is the result order)
        worker: Coroutine returning the task's value, or None for "no usable output"
        on_progress: Called with (completed, total) after each task settles

    Returns:
        One StageTaskResult per task id, in task_ids order
    """
    total = len(task_ids)
    if total == 0:
        return []

    channel: "asyncio.Queue[StageTaskResult]" = asyncio.Queue()
    tasks = [asyncio.create_task(_settle(task_id, worker, channel)) for task_id in task_ids]

    settled: Dict[str, StageTaskResult] = {}
    for completed in range(1, total + 1):
        result = await channel.get()
        settled[result.task_id] = result

        if result.ok:
            log(scope, f"✅ {result.task_id} finished ({completed}/{total})", run_id=run_id)
        else:
            log(scope, f"❌ {result.task_id} failed ({completed}/{total}): {result.error}", run_id=run_id)

        if on_progress:
            try:
                on_progress(completed, total)
            except Exception as e:
                log(scope, f"⚠️ Progress callback failed: {e}", run_id=run_id)

    # All results are in; this only reaps the finished tasks.
    await asyncio.gather(*tasks)

    return [settled[task_id] for task_id in task_ids]


def successful(results: List[StageTaskResult]) -> List:
    """Values of the tasks that produced usable output, order preserved."""
    return [result.value for result in results if result.ok]
