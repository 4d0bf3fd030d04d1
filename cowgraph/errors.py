"""
Exceptions raised by the graph engine.

Hierarchy:
    GraphError
    ├── InvalidArgumentError  - missing endpoint, element not in the graph, bad input
    ├── InvalidStateError     - the query needs a graph it does not have (e.g. empty)
    ├── SearchCancelledError  - a combinatorial search was cancelled by the caller
    └── SearchTimeoutError    - a combinatorial search ran past its deadline

InvalidArgumentError and InvalidStateError also derive from ValueError and
RuntimeError so callers catching the builtin types keep working.
"""


class GraphError(Exception):
    """Base class for every error raised by cowgraph."""

    pass


class InvalidArgumentError(GraphError, ValueError):
    """Raised when an argument violates the contract of the call."""

    pass


class InvalidStateError(GraphError, RuntimeError):
    """Raised when the graph cannot answer the query in its current state."""

    pass


class SearchCancelledError(GraphError):
    """Raised when an exhaustive search observes its cancel signal."""

    pass


class SearchTimeoutError(GraphError, TimeoutError):
    """Raised when an exhaustive search exceeds its time budget."""

    pass
