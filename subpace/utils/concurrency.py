"""Concurrency utilities for SUBPACE."""

import asyncio
import logging
import math
import time
from typing import Awaitable, Callable, Optional, Set

from subpace.core.exceptions import ConfigurationError
from subpace.core.interfaces import ResolveTask


class PacingController:
    """Average-rate limiter for dispatching lookups.

    Each call to allowance() returns how many new lookups may be started, based
    on the time elapsed since the last dispatch. Unused credit is not capped, so
    a run that could not dispatch for a while may start a short burst.
    """

    def __init__(self, qps: int, clock: Callable[[], float] = time.monotonic):
        """Initialize pacing controller.

        Args:
            qps: Target number of new lookups per second (positive integer)
            clock: Monotonic clock returning seconds

        Raises:
            ConfigurationError: If qps is not a positive integer
        """
        if isinstance(qps, bool) or not isinstance(qps, int) or qps < 1:
            raise ConfigurationError(f"Queries per second must be a positive integer, got {qps!r}")

        self.qps = qps
        self.clock = clock
        self.last_dispatch = clock()
        self.logger = logging.getLogger('subpace.pacing')

    @property
    def interval(self) -> float:
        """Seconds between two dispatches at the target rate."""
        return 1.0 / self.qps

    def allowance(self, now: Optional[float] = None) -> int:
        """Return the number of lookups permitted at this tick.

        Args:
            now: Current clock reading (defaults to the controller's clock)

        Returns:
            Number of new lookups that may be dispatched
        """
        if now is None:
            now = self.clock()

        elapsed = now - self.last_dispatch
        if elapsed > self.interval:
            return math.floor(elapsed / self.interval)
        return 0

    def record_dispatch(self, now: Optional[float] = None) -> None:
        """Record that a lookup has just been dispatched."""
        self.last_dispatch = self.clock() if now is None else now


class CompletionMultiplexer:
    """Wait for the first of many concurrent lookups to finish.

    Every submitted lookup runs as its own asyncio task and puts its result on
    a shared completion queue when done. The in-flight count is a counter, so
    waiting for the next completion never scans the outstanding lookups.
    """

    def __init__(self):
        """Initialize completion multiplexer."""
        self._completions: asyncio.Queue = asyncio.Queue()
        self._pending: Set[asyncio.Task] = set()
        self._in_flight = 0
        self.logger = logging.getLogger('subpace.multiplexer')

    def __len__(self) -> int:
        return self._in_flight

    def __bool__(self) -> bool:
        return self._in_flight > 0

    def submit(self, operation: Awaitable[ResolveTask]) -> asyncio.Task:
        """Start an operation and track it as in flight.

        Must be called from within a running event loop.

        Args:
            operation: Awaitable producing the finished task

        Returns:
            The asyncio task running the operation
        """
        handle = asyncio.ensure_future(self._run(operation))
        self._pending.add(handle)
        handle.add_done_callback(self._pending.discard)
        self._in_flight += 1
        return handle

    async def _run(self, operation: Awaitable[ResolveTask]) -> None:
        try:
            result = await operation
        except Exception as e:
            self.logger.error(f"In-flight operation failed: {e}")
            self._completions.put_nowait(e)
        else:
            self._completions.put_nowait(result)

    async def next_completed(self) -> ResolveTask:
        """Wait for the next operation to finish and return its result.

        Returns:
            The finished task of the first operation to complete

        Raises:
            RuntimeError: If nothing is in flight
            Exception: Whatever the completed operation raised
        """
        if self._in_flight == 0:
            raise RuntimeError("No operations in flight")

        item = await self._completions.get()
        self._in_flight -= 1
        if isinstance(item, Exception):
            raise item
        return item

    async def aclose(self) -> None:
        """Cancel every operation still in flight."""
        handles = [handle for handle in self._pending if not handle.done()]
        for handle in handles:
            handle.cancel()
        if handles:
            self.logger.debug(f"Cancelled {len(handles)} in-flight operations")
            await asyncio.gather(*handles, return_exceptions=True)
        self._pending.clear()
        self._in_flight = 0
