"""Rate-limited scheduler driving a subdomain scan."""

import asyncio
import logging
import sys
import time
from collections import deque
from enum import Enum
from typing import Callable, Iterable, Optional

from subpace.core.exceptions import ConfigurationError
from subpace.core.interfaces import ResolveStatus, ResolveTask, ScanSummary
from subpace.discovery.dns_enumeration import ResolutionWorker
from subpace.utils.concurrency import CompletionMultiplexer, PacingController
from subpace.utils.formatters import ResultWriter
from subpace.utils.progress import progress_bar

ORDERS = ('fifo', 'lifo')


class SchedulerState(Enum):
    """Lifecycle of a scheduler run."""
    RUNNING = 'running'
    DRAINING = 'draining'
    TERMINATED = 'terminated'


class TaskQueue:
    """Pending tasks, taken in a fixed order.

    fifo takes tasks in input order; lifo takes the most recently read task
    first. The queue only ever shrinks.
    """

    def __init__(self, tasks: Iterable[ResolveTask], order: str = 'fifo'):
        if order not in ORDERS:
            raise ConfigurationError(f"Invalid queue order: {order}")

        self.order = order
        self._tasks = deque(tasks)
        for task in self._tasks:
            if task.status is not ResolveStatus.PENDING:
                raise ValueError(f"Task {task.subdomain!r} is not pending")

    def __len__(self) -> int:
        return len(self._tasks)

    def __bool__(self) -> bool:
        return bool(self._tasks)

    def take(self) -> ResolveTask:
        """Remove and return the next task to dispatch."""
        if self.order == 'lifo':
            return self._tasks.pop()
        return self._tasks.popleft()


class Scheduler:
    """Dispatch lookups at a paced rate and emit each result as it completes.

    Each tick the scheduler asks the pacing controller how many lookups may
    start, dispatches that many tasks from the queue, then waits for the first
    in-flight lookup to finish and emits it. The run ends once the queue and
    the in-flight set are both empty.
    """

    def __init__(self, tasks: Iterable[ResolveTask], worker: ResolutionWorker,
                 writer: ResultWriter, qps: int = 10, order: str = 'fifo',
                 max_in_flight: Optional[int] = None, idle_interval: float = 0.02,
                 debug: bool = False, show_progress: bool = False,
                 clock: Callable[[], float] = time.monotonic):
        """Initialize the scheduler.

        Args:
            tasks: Pending tasks to resolve
            worker: Resolution worker performing each lookup
            writer: Writer receiving every completed task
            qps: Target number of new lookups per second
            order: Queue order, 'fifo' or 'lifo'
            max_in_flight: Optional cap on outstanding lookups (None for no cap)
            idle_interval: Seconds to sleep when nothing is in flight
            debug: Log queue, in-flight and completed counts every tick
            show_progress: Show a progress bar on stderr
            clock: Monotonic clock used for pacing

        Raises:
            ConfigurationError: If qps, order or max_in_flight is invalid
        """
        if max_in_flight is not None and max_in_flight < 1:
            raise ConfigurationError("Maximum in-flight lookups must be at least 1")

        self.queue = TaskQueue(tasks, order)
        self.worker = worker
        self.writer = writer
        self.pacing = PacingController(qps, clock=clock)
        self.max_in_flight = max_in_flight
        self.idle_interval = idle_interval
        self.debug = debug
        self.show_progress = show_progress
        self.clock = clock
        self.state = SchedulerState.RUNNING
        self.summary = ScanSummary(total=len(self.queue))
        self.peak_in_flight = 0
        self.logger = logging.getLogger('subpace.scheduler')

    def _dispatch(self, in_flight: CompletionMultiplexer) -> int:
        """Start as many lookups as pacing and the in-flight cap permit."""
        allowed = min(self.pacing.allowance(), len(self.queue))
        if self.max_in_flight is not None:
            allowed = min(allowed, self.max_in_flight - len(in_flight))

        for _ in range(allowed):
            task = self.queue.take()
            self.pacing.record_dispatch()
            in_flight.submit(self.worker.resolve(task))

        self.peak_in_flight = max(self.peak_in_flight, len(in_flight))
        return max(allowed, 0)

    async def run(self) -> ScanSummary:
        """Run the scan to completion.

        Returns:
            ScanSummary with the number of tasks per terminal status
        """
        started = self.clock()
        in_flight = CompletionMultiplexer()
        target = self.worker.target

        self.logger.info(f"Resolving {len(self.queue)} candidates for {target} at {self.pacing.qps} qps")
        if self.debug:
            self.logger.debug(f"Target interval: {self.pacing.interval:.6f}s")

        try:
            with progress_bar(total=len(self.queue), desc="Resolving",
                              disable=not self.show_progress, unit="name") as progress:
                while True:
                    self._dispatch(in_flight)
                    if not self.queue:
                        self.state = SchedulerState.DRAINING

                    if in_flight:
                        task = await in_flight.next_completed()
                        self.writer.emit(task)
                        self.summary.record(task)
                        progress.update(1)
                        progress.set_postfix(in_flight=len(in_flight))

                    # Only sleep while waiting for pacing to permit a dispatch
                    if not in_flight:
                        await asyncio.sleep(self.idle_interval)

                    if self.debug:
                        self.logger.debug(
                            f"Pending: {len(self.queue)}, In progress: {len(in_flight)}, "
                            f"Completed: {self.summary.completed}"
                        )

                    if not in_flight and not self.queue:
                        break
        finally:
            await in_flight.aclose()

        self.state = SchedulerState.TERMINATED
        self.summary.elapsed = self.clock() - started
        # Bare line on stderr, shown regardless of log level
        print("Completed", file=sys.stderr)
        return self.summary
