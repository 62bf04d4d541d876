"""Bounded fan-out of independent async fetches."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")

DEFAULT_BATCH_SIZE = 10


@dataclass
class BatchResult(Generic[T, R]):
    item: T
    value: R | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None


async def process_batched(
    items: Sequence[T],
    batch_size: int,
    fn: Callable[[T], Awaitable[R]],
) -> list[BatchResult[T, R]]:
    """Run ``fn`` over ``items``, ``batch_size`` at a time.

    Every item gets a result, in input order; a failing item records its
    exception instead of aborting the rest.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be >= 1, got {batch_size}")

    results: list[BatchResult[T, R]] = []
    for start in range(0, len(items), batch_size):
        chunk = items[start : start + batch_size]
        outcomes: list[Any] = await asyncio.gather(*(fn(item) for item in chunk), return_exceptions=True)
        for item, outcome in zip(chunk, outcomes):
            if isinstance(outcome, BaseException):
                results.append(BatchResult(item=item, error=outcome))
            else:
                results.append(BatchResult(item=item, value=outcome))
    return results
