"""
Edge types for the adjacency graph.

Hierarchy:
    Edge (abstract)        - ordered, possibly repeating endpoint references
    ├── UndirectedEdge     - traversable from every endpoint (hyperedges allowed)
    └── DirectedEdge       - one source, one or more destinations

Edges compare and hash by identity: two edges over the same endpoints are
distinct members of a graph, which is what makes multigraphs expressible.
They are frozen, so structural changes go through `with_added`,
`with_removed` and `without`, which return derived edges.

Factories:
    undirected(*nodes)              - UndirectedEdge over the given endpoints
    directed(source, *destinations) - DirectedEdge leaving `source`
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

from cowgraph.errors import InvalidArgumentError

N = TypeVar("N")


@dataclass(frozen=True, eq=False)
class Edge(Generic[N], ABC):
    """
    Base class for every edge.

    Attributes:
        nodes: Endpoints in edge-defined order. A node appearing twice is a
            self-loop on that node.
    """

    nodes: tuple[N, ...]

    def __post_init__(self) -> None:
        nodes = tuple(self.nodes)
        if any(node is None for node in nodes):
            raise InvalidArgumentError("edge endpoints can not be None")
        if len(nodes) < 2:
            raise InvalidArgumentError(
                f"an edge needs at least 2 endpoints, got {len(nodes)}"
            )
        object.__setattr__(self, "nodes", nodes)

    @abstractmethod
    def traversable_nodes(self, node: N) -> tuple[N, ...]:
        """Endpoints reachable by leaving `node` along this edge."""
        ...

    def is_traversable(self, node: N) -> bool:
        return bool(self.traversable_nodes(node))

    @property
    def rank(self) -> int:
        """Number of endpoint references (2 for an ordinary edge)."""
        return len(self.nodes)

    def with_added(self, node: N) -> Edge[N]:
        """Returns a copy of this edge with `node` appended as an endpoint."""
        if node is None:
            raise InvalidArgumentError("node can not be None")
        return replace(self, nodes=self.nodes + (node,))

    def with_removed(self, node: N) -> Edge[N] | None:
        """
        Returns a copy of this edge without one occurrence of `node`.

        Returns None when fewer than 2 endpoints would remain: the caller must
        drop the edge rather than keep a degenerate one.

        Raises:
            InvalidArgumentError: If `node` is None or not an endpoint.
        """
        if node is None:
            raise InvalidArgumentError("node can not be None")
        if node not in self.nodes:
            raise InvalidArgumentError(f"{node!r} is not an endpoint of {self}")
        remaining = list(self.nodes)
        remaining.remove(node)
        if len(remaining) < 2:
            return None
        return replace(self, nodes=tuple(remaining))

    def without(self, nodes: Iterable[N]) -> Edge[N] | None:
        """
        Removes every occurrence of each given node.

        Returns the edge itself when none of `nodes` is an endpoint, so
        untouched edges keep their identity.
        """
        edge: Edge[N] | None = self
        for node in nodes:
            while edge is not None and node in edge.nodes:
                edge = edge.with_removed(node)
        return edge


@dataclass(frozen=True, eq=False)
class UndirectedEdge(Edge[N]):
    """Edge traversable from any endpoint to all the other endpoints."""

    def traversable_nodes(self, node: N) -> tuple[N, ...]:
        if node not in self.nodes:
            return ()
        others = list(self.nodes)
        others.remove(node)
        return tuple(others)

    def __str__(self) -> str:
        return " -- ".join(str(node) for node in self.nodes)


@dataclass(frozen=True, eq=False)
class DirectedEdge(Edge[N]):
    """
    Edge traversable only from its source, nodes[0], to its destinations.

    Removing the source leaves no direction to follow, so it yields no edge.
    """

    @property
    def source(self) -> N:
        return self.nodes[0]

    @property
    def destinations(self) -> tuple[N, ...]:
        return self.nodes[1:]

    @property
    def destination(self) -> N:
        """The single destination of a binary directed edge."""
        if len(self.nodes) != 2:
            raise InvalidArgumentError(
                f"edge {self} has {len(self.nodes) - 1} destinations"
            )
        return self.nodes[1]

    def traversable_nodes(self, node: N) -> tuple[N, ...]:
        if node != self.source:
            return ()
        return self.destinations

    def with_removed(self, node: N) -> Edge[N] | None:
        # list.remove drops the first occurrence, which is the source
        if node is not None and node == self.source:
            return None
        return super().with_removed(node)

    def __str__(self) -> str:
        if len(self.nodes) == 2:
            return f"{self.source} -> {self.nodes[1]}"
        targets = ", ".join(str(node) for node in self.destinations)
        return f"{self.source} -> {{{targets}}}"


def undirected(*nodes: N) -> UndirectedEdge[N]:
    """Creates an UndirectedEdge over the given endpoints."""
    return UndirectedEdge(nodes)


def directed(source: N, *destinations: N) -> DirectedEdge[N]:
    """Creates a DirectedEdge from `source` to each destination."""
    return DirectedEdge((source, *destinations))
