"""Progress indicator utilities for SUBPACE."""

import sys
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from tqdm import tqdm


class ProgressIndicator:
    """Progress indicator for a running scan."""

    def __init__(self, total: Optional[int] = None, desc: str = "",
                 disable: bool = False, unit: str = "it"):
        """Initialize progress indicator.

        Args:
            total: Total number of items (None for indeterminate)
            desc: Description of the operation
            disable: Whether to disable the progress indicator
            unit: Unit of items
        """
        self.total = total
        self.desc = desc
        self.disable = disable
        self.unit = unit
        self.current = 0
        self.start_time = None
        self.tqdm_instance = None

    def start(self) -> None:
        """Start the progress indicator."""
        if self.disable:
            return

        self.start_time = time.time()
        self.tqdm_instance = tqdm(
            total=self.total,
            desc=self.desc,
            unit=self.unit,
            file=sys.stderr
        )

    def update(self, n: int = 1) -> None:
        """Update progress by n units.

        Args:
            n: Number of units to increment by
        """
        self.current += n
        if self.tqdm_instance:
            self.tqdm_instance.update(n)

    def set_postfix(self, **kwargs) -> None:
        """Show extra counters next to the bar (e.g., in_flight=3)."""
        if self.tqdm_instance:
            self.tqdm_instance.set_postfix(kwargs, refresh=False)

    def close(self) -> None:
        """Close the progress indicator."""
        if self.tqdm_instance:
            self.tqdm_instance.close()
            self.tqdm_instance = None


@contextmanager
def progress_bar(total: Optional[int] = None, desc: str = "",
                disable: bool = False, unit: str = "it") -> Iterator[ProgressIndicator]:
    """Context manager for progress indicator.

    Args:
        total: Total number of items (None for indeterminate)
        desc: Description of the operation
        disable: Whether to disable the progress indicator
        unit: Unit of items

    Yields:
        ProgressIndicator instance
    """
    progress = ProgressIndicator(total, desc, disable, unit)
    progress.start()
    try:
        yield progress
    finally:
        progress.close()
