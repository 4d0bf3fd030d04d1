"""
In-place mutable graph.

`MutableGraph` keeps the `Graph` read API and adds add/remove/clear. Each
mutation computes a complete new `AdjacencyIndex` and publishes it with a
single attribute assignment while holding the writer lock, so a reader sees
either the state before or the state after a mutation, never a mix.

Analyses (connectivity, cycles, structure) run against `snapshot()`, an
immutable `Graph` sharing the current index, so a long analysis is not
disturbed by concurrent writers. Writers must still be serialized, which the
internal lock does; callers needing read-modify-write sequences should hold
`graph.lock` themselves.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from typing import TypeVar

from typing_extensions import Self

from cowgraph.adjacency import AdjacencyIndex
from cowgraph.cycles import CycleFinder
from cowgraph.edges import Edge
from cowgraph.errors import InvalidArgumentError, InvalidStateError
from cowgraph.graph import Graph
from cowgraph.membership import accepts_join, accepts_leave

logger = logging.getLogger(__name__)

N = TypeVar("N")
E = TypeVar("E", bound=Edge)


class MutableGraph(Graph[N, E]):
    """
    Graph supporting in-place add and remove.

    Args:
        nodes, edges, cycle_finder: As for Graph.
        context_enabled: Consult elements implementing GraphMember before they
            join or leave this graph.
    """

    def __init__(
        self,
        nodes: Iterable[N] = (),
        edges: Iterable[E] = (),
        *,
        cycle_finder: CycleFinder | None = None,
        context_enabled: bool = False,
    ) -> None:
        super().__init__(nodes, edges, cycle_finder=cycle_finder)
        self.context_enabled = context_enabled
        self._lock = threading.RLock()

    def __copy__(self) -> Self:
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone._lock = threading.RLock()
        return clone

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def snapshot(self) -> Graph[N, E]:
        """An immutable Graph holding the current state."""
        graph: Graph[N, E] = Graph.__new__(Graph)
        graph._index = self._index
        graph._cycle_finder = self._cycle_finder
        return graph

    def _stable(self) -> Graph[N, E]:
        return self.snapshot()

    def _publish(self, index: AdjacencyIndex[N, E]) -> None:
        self._index = index

    def _may_join(self, element: object) -> bool:
        return not self.context_enabled or accepts_join(element, self)

    def _may_leave(self, element: object) -> bool:
        return not self.context_enabled or accepts_leave(element, self)

    # =========================================================================
    # Mutation
    # =========================================================================

    def add_edge(self, edge: E) -> bool:
        """
        Adds `edge`. Returns False if it is already present or refuses to join.

        Raises:
            InvalidArgumentError: If `edge` is None or has an endpoint that is
                not a node of this graph.
        """
        with self._lock:
            index = self._index
            self._check_new_edge(index, edge)
            if index.has_edge(edge) or not self._may_join(edge):
                return False
            self._publish(index.with_edge(edge))
            return True

    def add_node(self, node: N) -> bool:
        """Adds `node`. Returns False if it is already present or refuses to join."""
        if node is None:
            raise InvalidArgumentError("node can not be None")
        with self._lock:
            index = self._index
            if index.has_node(node) or not self._may_join(node):
                return False
            self._publish(index.with_node(node))
            return True

    def remove_edge(self, edge: E) -> bool:
        """Removes `edge`. Returns False if it is absent or refuses to leave."""
        if edge is None:
            raise InvalidArgumentError("edge can not be None")
        with self._lock:
            index = self._index
            if not index.has_edge(edge) or not self._may_leave(edge):
                return False
            self._publish(index.without_edge(edge))
            return True

    def remove_node(self, node: N) -> bool:
        """
        Removes `node`, shrinking or dropping its incident edges.

        A shrunken edge is a new element, so it is asked to join in place of
        the edge it replaces. Returns False if the node is absent, if it or
        one of its incident edges refuses to leave, or if a shrunken edge
        refuses to join; the graph is then unchanged.
        """
        if node is None:
            raise InvalidArgumentError("node can not be None")
        with self._lock:
            index = self._index
            if not index.has_node(node):
                return False
            incident = index.adjacent_edges(node)
            if not all(self._may_leave(element) for element in (node, *incident)):
                return False
            residual = self.snapshot().residual([node])._index
            shrunken = [edge for edge in residual.edge_order if not index.has_edge(edge)]
            if not all(self._may_join(edge) for edge in shrunken):
                return False
            self._publish(residual)
            return True

    def clear(self) -> bool:
        """
        Removes every edge, then every node. Returns True if anything was removed.

        Raises:
            InvalidStateError: If an element refuses to leave. The graph is
                left unchanged.
        """
        with self._lock:
            index = self._index
            for element in (*index.edge_order, *index.node_order):
                if not self._may_leave(element):
                    raise InvalidStateError(f"{element} will not leave the graph")
            if not index.node_order:
                return False
            logger.debug(
                f"Clearing {len(index.node_order)} nodes and "
                f"{len(index.edge_order)} edges"
            )
            self._publish(AdjacencyIndex.build((), ()))
            return True
