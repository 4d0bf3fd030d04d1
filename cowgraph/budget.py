"""
Cancellation and timeout guard for the exponential searches.

The connectivity-number search enumerates the power set of nodes or edges and
the cycle finder enumerates every simple cycle. Both call `SearchBudget.check()`
once per step so a caller can bound them with a deadline or a cancel event.
"""

import threading
import time
from dataclasses import dataclass, field

from cowgraph.constants import BUDGET_CHECK_INTERVAL, DEFAULT_SEARCH_TIMEOUT
from cowgraph.errors import SearchCancelledError, SearchTimeoutError


@dataclass
class SearchBudget:
    """
    Tracks a deadline and an optional cancel event for one search.

    Attributes:
        timeout: Seconds allowed from construction. None disables the deadline.
        cancel: Event the caller sets to abort the search.
    """

    timeout: float | None = None
    cancel: threading.Event | None = None
    _deadline: float | None = field(init=False, default=None)
    _steps: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if self.timeout is not None:
            if self.timeout < 0:
                raise ValueError("timeout must be non-negative")
            self._deadline = time.monotonic() + self.timeout

    @classmethod
    def create(
        cls,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> "SearchBudget":
        """Builds a budget, falling back to DEFAULT_SEARCH_TIMEOUT."""
        if timeout is None:
            timeout = DEFAULT_SEARCH_TIMEOUT
        return cls(timeout=timeout, cancel=cancel)

    @property
    def steps(self) -> int:
        return self._steps

    def check(self) -> None:
        """
        Records one search step.

        Raises:
            SearchCancelledError: If the cancel event is set.
            SearchTimeoutError: If the deadline has passed.
        """
        self._steps += 1
        if self.cancel is not None and self.cancel.is_set():
            raise SearchCancelledError(f"search cancelled after {self._steps} steps")
        # Reading the clock every step is measurable on small graphs
        if self._deadline is None or self._steps % BUDGET_CHECK_INTERVAL != 1:
            return
        if time.monotonic() >= self._deadline:
            raise SearchTimeoutError(
                f"search exceeded {self.timeout}s after {self._steps} steps"
            )
