"""
Ordered Parallel Map

Evaluates a per-index function on a thread pool and hands the results back to
the calling thread in input order. The caller is the only consumer, so any
state it mutates while iterating needs no locking.

Flow Control:
    At most ``max_workers * window`` computations are in flight. The oldest
    pending future is awaited before a new one is submitted once the window
    is full, which bounds memory to the window regardless of input length.

Failure:
    The first exception raised by the function propagates to the consumer
    when its result is reached; pending futures are cancelled.
"""

from __future__ import annotations

import os
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Deque, Iterable, Iterator, Optional, Tuple, TypeVar

R = TypeVar("R")


def default_workers() -> int:
    """Same default as ThreadPoolExecutor."""
    return min(32, (os.cpu_count() or 1) + 4)


def ordered_parallel_map(
    fn: Callable[[int], R],
    indices: Iterable[int],
    max_workers: Optional[int] = None,
    window: int = 4,
) -> Iterator[Tuple[int, R]]:
    """
    Yield ``(idx, fn(idx))`` for every idx, in the order of ``indices``.

    ``max_workers=1`` runs inline on the calling thread.
    """
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    if max_workers == 1:
        for idx in indices:
            yield idx, fn(idx)
        return

    workers = max_workers or default_workers()
    limit = workers * window
    pending: Deque[Tuple[int, Future]] = deque()
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fastrec")
    try:
        for idx in indices:
            pending.append((idx, executor.submit(fn, idx)))
            if len(pending) >= limit:
                head, future = pending.popleft()
                yield head, future.result()
        while pending:
            head, future = pending.popleft()
            yield head, future.result()
    finally:
        executor.shutdown(wait=True, cancel_futures=True)


__all__ = ["default_workers", "ordered_parallel_map"]
