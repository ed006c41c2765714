"""Request pacing for rate-limited upstream services.

`StaggeredBatchGate` runs an async worker over a sequence of items in
fixed-size groups:

- members of a group are dispatched `stagger_seconds` apart,
- a group starts only after the previous group has fully settled and a
  further `pause_seconds` has elapsed,
- results are returned in input order, whatever order requests complete in.

Time is read through a `Clock`, so tests can substitute a virtual clock and
assert on dispatch times without waiting.

Example:
    ```python
    gate = StaggeredBatchGate(batch_size=3, stagger_seconds=0.2, pause_seconds=1.2)
    names = await gate.run(points, lookup_name)
    ```
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class Clock(Protocol):
    """Time source used by the gate."""

    def now(self) -> float:
        """Current time in seconds."""
        ...

    async def sleep_until(self, deadline: float) -> None:
        """Suspend until `now() >= deadline`."""
        ...


class MonotonicClock:
    """Wall-clock implementation backed by `time.monotonic` and `asyncio.sleep`."""

    def now(self) -> float:
        return time.monotonic()

    async def sleep_until(self, deadline: float) -> None:
        delay = deadline - self.now()
        if delay > 0:
            await asyncio.sleep(delay)


class StaggeredBatchGate:
    """Fixed-interval gate that paces work in staggered, sequential batches."""

    def __init__(
        self,
        batch_size: int,
        stagger_seconds: float = 0.0,
        pause_seconds: float = 0.0,
        clock: Clock | None = None,
    ):
        """Initialize the gate.

        Args:
            batch_size: Maximum number of items in flight per group
            stagger_seconds: Delay between dispatches within a group
            pause_seconds: Delay between one group settling and the next starting
            clock: Time source (defaults to the monotonic wall clock)
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if stagger_seconds < 0 or pause_seconds < 0:
            raise ValueError("delays must not be negative")
        self.batch_size = batch_size
        self.stagger_seconds = stagger_seconds
        self.pause_seconds = pause_seconds
        self.clock: Clock = clock or MonotonicClock()

    def batches(self, items: Sequence[T]) -> list[Sequence[T]]:
        """Split items into dispatch groups."""
        return [
            items[start:start + self.batch_size]
            for start in range(0, len(items), self.batch_size)
        ]

    async def run(
        self,
        items: Sequence[T],
        worker: Callable[[T], Awaitable[R]],
    ) -> list[R]:
        """Apply `worker` to every item, paced by the gate.

        Every member of a group settles before the group is combined. If any
        worker raised, the first exception in input order propagates and later
        groups are not started.
        """
        results: list[R] = []
        for index, batch in enumerate(self.batches(items)):
            if index > 0 and self.pause_seconds:
                logger.debug(f"Pausing {self.pause_seconds:.2f}s before batch {index + 1}")
                await self.clock.sleep_until(self.clock.now() + self.pause_seconds)

            batch_start = self.clock.now()
            batch_results = await asyncio.gather(
                *(
                    self._dispatch(item, batch_start + offset * self.stagger_seconds, worker)
                    for offset, item in enumerate(batch)
                ),
                return_exceptions=True,
            )
            for outcome in batch_results:
                if isinstance(outcome, BaseException):
                    raise outcome
            results.extend(batch_results)
        return results

    async def _dispatch(
        self,
        item: T,
        at: float,
        worker: Callable[[T], Awaitable[R]],
    ) -> R:
        await self.clock.sleep_until(at)
        return await worker(item)
