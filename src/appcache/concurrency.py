from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from contextvars import copy_context
from dataclasses import dataclass
from typing import Any, Callable


@dataclass
class TaskResult:
    index: int
    value: Any = None
    error: Exception | None = None


def _capture(index: int, task: Callable[[], Any]) -> TaskResult:
    try:
        return TaskResult(index, value=task())
    except Exception as exc:
        return TaskResult(index, error=exc)


def run_indexed_tasks(
    tasks: list[tuple[int, Callable[[], Any]]],
    *,
    max_workers: int,
) -> list[TaskResult]:
    """
    Run every task and return one TaskResult per task, sorted by index.

    A task that raises does not cancel or skip the others; its exception is
    stored on its own result. Each task runs in a copy of the caller's context
    so ContextVar flags such as verbose logging carry into worker threads.
    """
    if not tasks:
        return []
    if max_workers <= 1 or len(tasks) == 1:
        results = [_capture(index, task) for index, task in tasks]
    else:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(tasks))) as executor:
            futures = [
                executor.submit(copy_context().run, _capture, index, task)
                for index, task in tasks
            ]
        results = [future.result() for future in futures]
    return sorted(results, key=lambda result: result.index)
