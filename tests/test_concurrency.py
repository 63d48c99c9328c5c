from __future__ import annotations

import threading

import pytest

from appcache.concurrency import run_indexed_tasks
from appcache.runtime import (
    get_verbose_logging,
    reset_verbose_logging,
    set_verbose_logging,
)


def _fail() -> str:
    raise ValueError("bad task")


@pytest.mark.parametrize("max_workers", [1, 3])
def test_failing_task_does_not_cancel_the_others(max_workers: int) -> None:
    tasks = [(2, lambda: "c"), (0, _fail), (1, lambda: "b")]

    results = run_indexed_tasks(tasks, max_workers=max_workers)

    assert [r.index for r in results] == [0, 1, 2]
    assert isinstance(results[0].error, ValueError)
    assert results[0].value is None
    assert [r.value for r in results[1:]] == ["b", "c"]
    assert all(r.error is None for r in results[1:])


def test_empty_task_list() -> None:
    assert run_indexed_tasks([], max_workers=4) == []


def test_worker_threads_see_the_callers_context() -> None:
    token = set_verbose_logging(True)
    try:
        results = run_indexed_tasks(
            [(i, get_verbose_logging) for i in range(3)], max_workers=3
        )
    finally:
        reset_verbose_logging(token)

    assert [r.value for r in results] == [True, True, True]


def test_tasks_run_in_parallel() -> None:
    barrier = threading.Barrier(2, timeout=5)

    results = run_indexed_tasks(
        [(0, barrier.wait), (1, barrier.wait)], max_workers=2
    )

    assert all(r.error is None for r in results)
