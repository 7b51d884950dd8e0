"""DNS enumeration module for SUBPACE."""

import logging
from typing import List

from subpace.core.exceptions import InputError
from subpace.core.interfaces import (
    LookupFailure, LookupOutcome, ResolverClient, ResolveStatus, ResolveTask
)

logger = logging.getLogger('subpace.discovery.dns_enumeration')


def load_tasks(path: str) -> List[ResolveTask]:
    """Load candidate subdomains from a wordlist file.

    Each line becomes one task whose label is the line's content without its
    line terminator. Empty lines give tasks with an empty label. Lines that
    are not valid UTF-8 are skipped.

    Args:
        path: Path to a newline-delimited wordlist

    Returns:
        List of pending tasks in file order

    Raises:
        InputError: If the file cannot be opened or read
    """
    try:
        with open(path, 'rb') as f:
            raw_lines = f.read().split(b'\n')
    except OSError as e:
        raise InputError(f"Cannot read subdomains file {path}: {e.strerror or e}") from e

    # A trailing newline does not start another line
    if raw_lines and raw_lines[-1] == b'':
        raw_lines.pop()

    tasks = []
    for number, raw in enumerate(raw_lines, start=1):
        if raw.endswith(b'\r'):
            raw = raw[:-1]
        try:
            label = raw.decode('utf-8')
        except UnicodeDecodeError:
            logger.debug(f"Skipping line {number} of {path}: not valid UTF-8")
            continue
        tasks.append(ResolveTask(label))

    logger.debug(f"Loaded {len(tasks)} candidates from {path}")
    return tasks


def classify_outcome(outcome: LookupOutcome) -> ResolveStatus:
    """Map a lookup outcome to the terminal status of its task.

    Timeouts are kept apart because they may be transient. Every other failure
    collapses into CantResolve.

    Args:
        outcome: Outcome reported by the resolver client

    Returns:
        Terminal status for the task
    """
    if outcome.ok:
        return ResolveStatus.RESOLVED
    if outcome.failure is LookupFailure.TIMEOUT:
        return ResolveStatus.TIMEOUT
    return ResolveStatus.CANT_RESOLVE


class ResolutionWorker:
    """Resolve single tasks against the target domain."""

    def __init__(self, resolver: ResolverClient, target: str, retries: int = 0):
        """Initialize resolution worker.

        Args:
            resolver: Resolver client used for lookups
            target: Target domain appended to every label
            retries: Extra attempts for a lookup that timed out
        """
        if retries < 0:
            raise ValueError("retries must be zero or positive")

        self.resolver = resolver
        self.target = target
        self.retries = retries
        self.logger = logger

    async def resolve(self, task: ResolveTask) -> ResolveTask:
        """Look up a task's name and finish it with the classified status.

        Args:
            task: Pending task

        Returns:
            The same task, finished
        """
        name = task.query_name(self.target)

        while True:
            task.attempts += 1
            try:
                outcome = await self.resolver.lookup(name)
            except Exception as e:
                self.logger.debug(f"Resolver client failed for {name}: {e}")
                outcome = LookupOutcome.failed(LookupFailure.OTHER, e)

            status = classify_outcome(outcome)
            if status is ResolveStatus.TIMEOUT and task.attempts <= self.retries:
                self.logger.debug(f"Retry {task.attempts}/{self.retries} for {name} after timeout")
                continue
            break

        return task.finish(status, outcome.records if status is ResolveStatus.RESOLVED else None)
