"""Base interfaces and data models for SUBPACE components.

This module defines the core data models used throughout the SUBPACE application
(the resolve task and its status, and the outcome of a single lookup) together
with the abstract base classes that define the contract for resolver clients
and output formatters.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ResolveStatus(Enum):
    """Status of a resolve task.

    The value of each member is the exact text written to the output.
    """
    PENDING = 'Pending'
    TIMEOUT = 'Timeout'
    RESOLVED = 'Resolved'
    CANT_RESOLVE = 'CantResolve'

    @property
    def is_terminal(self) -> bool:
        return self is not ResolveStatus.PENDING

    def __str__(self) -> str:
        return self.value


@dataclass
class ResolveTask:
    """Data model representing one candidate subdomain to resolve.

    A task starts out pending and is finished exactly once, after its lookup
    completes. It is never dispatched or emitted twice.

    Attributes:
        subdomain: Candidate label, exactly as read from the wordlist (may be empty)
        status: Current status of the task
        addresses: Addresses returned by a successful lookup
        attempts: Number of lookups issued for this task
    """
    subdomain: str
    status: ResolveStatus = ResolveStatus.PENDING
    addresses: List[str] = None
    attempts: int = 0

    def __post_init__(self):
        """Initialize default values for optional attributes."""
        if self.addresses is None:
            self.addresses = []

    def name(self, target: str) -> str:
        """Return the display name of the task (e.g., www.example.com).

        An empty label gives ".example.com".
        """
        return f"{self.subdomain}.{target}"

    def query_name(self, target: str) -> str:
        """Return the name actually looked up.

        An empty label queries the bare target domain.
        """
        if not self.subdomain:
            return target
        return f"{self.subdomain}.{target}"

    def finish(self, status: ResolveStatus, addresses: Optional[List[str]] = None) -> 'ResolveTask':
        """Move the task to its terminal status.

        Args:
            status: Terminal status of the task
            addresses: Addresses returned by the lookup, if any

        Returns:
            The task itself

        Raises:
            ValueError: If the task is already finished or the status is not terminal
        """
        if not status.is_terminal:
            raise ValueError(f"Cannot finish task {self.subdomain!r} as {status}")
        if self.status.is_terminal:
            raise ValueError(f"Task {self.subdomain!r} already finished as {self.status}")

        self.status = status
        if addresses:
            self.addresses = list(addresses)
        return self


class LookupFailure(Enum):
    """Closed set of lookup failures reported by a resolver client."""
    TIMEOUT = 'timeout'
    NO_RECORDS_FOUND = 'no_records_found'
    OTHER = 'other'


@dataclass
class LookupOutcome:
    """Outcome of a single name lookup.

    Either a record set (failure is None) or one of the LookupFailure cases.

    Attributes:
        records: Records returned by the lookup, as text
        failure: Failure case, or None on success
        error: Original exception for a failure, kept for diagnostics
    """
    records: List[str] = field(default_factory=list)
    failure: Optional[LookupFailure] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, records: List[str]) -> 'LookupOutcome':
        return cls(records=list(records))

    @classmethod
    def failed(cls, failure: LookupFailure, error: Optional[BaseException] = None) -> 'LookupOutcome':
        return cls(failure=failure, error=error)

    @property
    def ok(self) -> bool:
        """True when the lookup returned at least one record."""
        return self.failure is None and bool(self.records)


@dataclass
class ScanSummary:
    """Aggregated statistics about a completed scan.

    Attributes:
        total: Number of tasks loaded
        completed: Number of tasks emitted
        counts: Number of tasks per terminal status
        elapsed: Wall-clock duration of the scan in seconds
    """
    total: int = 0
    completed: int = 0
    counts: Dict[ResolveStatus, int] = None
    elapsed: float = 0.0

    def __post_init__(self):
        """Initialize default values for optional attributes."""
        if self.counts is None:
            self.counts = {
                ResolveStatus.RESOLVED: 0,
                ResolveStatus.TIMEOUT: 0,
                ResolveStatus.CANT_RESOLVE: 0,
            }

    def record(self, task: ResolveTask) -> None:
        """Count a completed task."""
        self.completed += 1
        self.counts[task.status] = self.counts.get(task.status, 0) + 1


class ResolverClient(ABC):
    """Base interface for asynchronous resolver clients.

    A resolver client performs one lookup per call and reports the result as a
    LookupOutcome. It owns per-query timeouts and transport details; callers
    never see resolver exceptions.
    """

    @abstractmethod
    async def lookup(self, name: str) -> LookupOutcome:
        """Look up a fully qualified name.

        Args:
            name: Name to resolve (e.g., www.example.com)

        Returns:
            LookupOutcome with the records found or the failure case
        """
        pass


class OutputFormatter(ABC):
    """Base interface for output formatters.

    Each formatter converts one completed task into a single line of output in
    a specific format, such as text, JSON, or CSV.
    """

    header: Optional[str] = None

    @abstractmethod
    def format(self, task: ResolveTask, target: str) -> str:
        """Format a completed task as one output line (without newline).

        Args:
            task: The completed task
            target: Target domain of the scan

        Returns:
            Formatted line
        """
        pass

    def to_dict(self, task: ResolveTask, target: str) -> Dict[str, Any]:
        """Return the serializable fields of a completed task."""
        return {
            'name': task.name(target),
            'subdomain': task.subdomain,
            'status': task.status.value,
            'addresses': task.addresses,
        }
