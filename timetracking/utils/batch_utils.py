"""
Bounded-Concurrency Batch Utilities

Shared primitive for running many upstream requests without overwhelming
Azure DevOps or 7pace. Tasks are split into windows of `concurrency` tasks;
every task in a window runs concurrently and the next window only starts once
the whole window has finished.

Usage:
    from timetracking.utils.batch_utils import run_batched

    results = await run_batched(
        [lambda ids=ids: client.get_work_items(ids) for ids in chunked(all_ids, 200)],
        concurrency=3,
        logger=logger,
    )
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


def chunked(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into consecutive lists of at most `size` elements.

    Args:
        items: Items to split
        size: Maximum chunk length (must be positive)

    Returns:
        List of chunks, empty when items is empty

    Raises:
        ValueError: If size is not positive
    """
    if size < 1:
        raise ValueError(f"Chunk size must be positive, got {size}")

    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def run_batched(
    tasks: Iterable[Callable[[], Awaitable[T]]],
    concurrency: int,
    logger: logging.Logger | None = None,
) -> list[T]:
    """
    Run async task factories in sequential windows of bounded concurrency.

    Output order matches input order. If any task in a window fails, siblings
    already started in that window are allowed to finish, then the first failure
    (in input order) is raised and no further windows are started.

    Args:
        tasks: Zero-argument callables returning awaitables
        concurrency: Maximum number of tasks in flight at once
        logger: Optional logger for progress messages

    Returns:
        Results in the same order as tasks

    Raises:
        ValueError: If concurrency is not positive
        Exception: The first exception raised by a task in the failing window
    """
    if concurrency < 1:
        raise ValueError(f"Concurrency must be positive, got {concurrency}")

    task_list = list(tasks)
    if not task_list:
        return []

    windows = chunked(task_list, concurrency)
    if logger:
        logger.info(f"Running {len(task_list)} tasks in {len(windows)} windows (concurrency={concurrency})")

    results: list[T] = []
    for window_num, window in enumerate(windows, start=1):
        outcomes = await asyncio.gather(*(task() for task in window), return_exceptions=True)

        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                if logger:
                    logger.warning(f"  Window {window_num}/{len(windows)}: failed ({outcome.__class__.__name__})")
                raise outcome

        results.extend(outcomes)  # type: ignore[arg-type]
        if logger:
            logger.debug(f"  Window {window_num}/{len(windows)}: {len(window)} tasks done")

    return results
