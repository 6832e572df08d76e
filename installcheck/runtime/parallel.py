"""
parallel.py - Bounded fan-out for independent per-artifact checks.

Completion order is arbitrary; results are merged back by each item's
position in the input so reports are reproducible.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def map_in_order(fn: Callable[[T], R], items: Sequence[T], max_workers: int) -> List[R]:
    """Apply ``fn`` to every item with at most ``max_workers`` threads.

    Exceptions raised by ``fn`` propagate to the caller.
    """
    if not items:
        return []
    if max_workers <= 1 or len(items) == 1:
        return [fn(item) for item in items]

    results: Dict[int, R] = {}
    with ThreadPoolExecutor(max_workers=min(max_workers, len(items))) as pool:
        futures = {pool.submit(fn, item): index for index, item in enumerate(items)}
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    logger.debug("Completed %d checks with %d workers", len(items), max_workers)
    return [results[index] for index in range(len(items))]


__all__ = ["map_in_order"]
