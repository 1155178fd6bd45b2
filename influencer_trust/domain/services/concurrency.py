"""Bounded concurrent execution of independent batch tasks."""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class BatchOutcome(Generic[T]):
    """Settled result of one task: either a value or the error it raised."""

    index: int
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ConcurrencyLimiter:
    """Runs task factories with at most ``max_concurrency`` in flight.

    Every task runs to completion or to its own failure. A failing task
    never cancels its siblings; its exception is returned as an outcome.
    """

    def __init__(self, max_concurrency: int):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._max_concurrency = max_concurrency

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    async def run_all(self, factories: Sequence[Callable[[], Awaitable[T]]]) -> List[BatchOutcome[T]]:
        """Run every factory and wait for all of them to settle.

        Args:
            factories: Zero-argument callables returning awaitables; a task
                is only created once a slot is free

        Returns:
            One outcome per factory, in input order
        """
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def _guarded(index: int, factory: Callable[[], Awaitable[T]]) -> BatchOutcome[T]:
            async with semaphore:
                try:
                    return BatchOutcome(index=index, value=await factory())
                except Exception as e:
                    return BatchOutcome(index=index, error=e)

        return list(await asyncio.gather(*(_guarded(i, f) for i, f in enumerate(factories))))


def chunked(items: Sequence[T], size: int) -> List[List[T]]:
    """Split a sequence into consecutive batches of ``size`` (last may be shorter)."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
