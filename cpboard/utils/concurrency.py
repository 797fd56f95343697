"""
Bounded concurrent mapping for async workloads.

A fixed pool of worker tasks pulls indices from a shared iterator, so at most
``concurrency`` mapper calls are ever in flight. Each worker writes into its own
result slot, which keeps the output aligned with the input no matter which
call finishes first.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')


async def bounded_map(
    items: Sequence[T],
    mapper: Callable[[T, int], Awaitable[U]],
    concurrency: int
) -> List[U]:
    """
    Apply an async mapper to every item with a fixed in-flight limit.

    Args:
        items: Input sequence; result[i] corresponds to items[i]
        mapper: Async callable invoked as mapper(item, index)
        concurrency: Maximum number of outstanding mapper calls (>= 1)

    Returns:
        List of mapper results in input order

    Raises:
        ValueError: If concurrency is below 1
        Exception: The first error raised by any mapper call. Remaining
            workers are cancelled and their results discarded.
    """
    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    items = list(items)
    if not items:
        return []

    results: List[U] = [None] * len(items)  # type: ignore[list-item]
    pending_indices = iter(range(len(items)))

    async def worker():
        for index in pending_indices:
            results[index] = await mapper(items[index], index)

    workers = [asyncio.create_task(worker()) for _ in range(min(concurrency, len(items)))]

    try:
        done, pending = await asyncio.wait(workers, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        await cancel_all(workers)
        raise

    failed = [task for task in done if not task.cancelled() and task.exception() is not None]
    if failed:
        await cancel_all(pending)
        error = failed[0].exception()
        logger.debug(f"bounded_map aborted after mapper failure: {error!r}")
        raise error

    return results


async def cancel_all(tasks):
    """Cancel tasks and wait for them to unwind."""
    for task in tasks:
        if not task.done():
            task.cancel()
    if tasks:
        await asyncio.gather(*tasks, return_exceptions=True)
