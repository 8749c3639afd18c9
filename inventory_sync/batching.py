"""Fixed-size batching with a pause between batches."""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass
class BatchRun:
    results: List = field(default_factory=list)
    batches: int = 0


def run_in_batches(
    items: Sequence[T],
    batch_size: int,
    delay_seconds: float,
    work_fn: Callable[[T], R],
) -> BatchRun:
    """
    Run ``work_fn`` over ``items`` in contiguous batches.

    Items are processed one at a time in order. After every batch except the
    last the scheduler sleeps ``delay_seconds`` to smooth load on the target
    API; the delay has no effect on correctness.

    Args:
        items: The pre-filtered work list.
        batch_size: Items per batch, must be at least 1.
        delay_seconds: Pause between batches.
        work_fn: Called once per item; its return values are collected.

    Returns:
        BatchRun: Per-item results in input order and the number of batches run.

    Raises:
        ValueError: If batch_size is less than 1.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be at least 1, got {batch_size}")

    run = BatchRun()
    total_batches = (len(items) + batch_size - 1) // batch_size

    for start in range(0, len(items), batch_size):
        batch = items[start : start + batch_size]
        run.batches += 1
        logger.info(f"Processing batch {run.batches}/{total_batches} ({len(batch)} items)")

        for item in batch:
            run.results.append(work_fn(item))

        if run.batches < total_batches and delay_seconds > 0:
            logger.info(f"Waiting {delay_seconds}s before next batch")
            time.sleep(delay_seconds)

    return run
