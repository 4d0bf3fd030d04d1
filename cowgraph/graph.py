"""
Adjacency-list graph with copy-on-write derivation.

A `Graph` owns an immutable `AdjacencyIndex` built from a node set and an edge
set. It never changes after construction: every `clone_*` operation and
`residual`/`subgraph` return a new graph, leaving the original valid and
unchanged. Derived graphs share every index entry the change did not touch.

Nodes are opaque hashable values supplied by the caller. They must not be
mutated in a way that changes their hash or equality while a graph holds them;
under that obligation a graph can be read from several threads at once.

Structure:
    Queries        - nodes, edges, adjacency, traversability, degrees
    Connectivity   - delegates to cowgraph.connectivity
    Cycles         - delegates to the graph's CycleFinder
    Structure      - delegates to cowgraph.structure
    Mutation       - clone_add_*, clone_remove_*, residual, subgraph
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from typing_extensions import Self

from cowgraph import connectivity, structure
from cowgraph.adjacency import AdjacencyIndex
from cowgraph.cycles import Cycle, CycleFinder, ExhaustiveDepthFirstSearchCycleFinder
from cowgraph.edges import Edge
from cowgraph.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

N = TypeVar("N")
E = TypeVar("E", bound=Edge)


class Graph(Generic[N, E]):
    """
    Immutable graph over arbitrary hashable nodes and Edge instances.

    Args:
        nodes: Every node of the graph.
        edges: Every edge. All endpoints must be in `nodes`.
        cycle_finder: Cycle analysis strategy, inherited by derived graphs.
            Defaults to ExhaustiveDepthFirstSearchCycleFinder.

    Raises:
        InvalidArgumentError: If an edge endpoint is missing from `nodes`, or
            a node or edge is None.
    """

    def __init__(
        self,
        nodes: Iterable[N] = (),
        edges: Iterable[E] = (),
        *,
        cycle_finder: CycleFinder | None = None,
    ) -> None:
        self._index: AdjacencyIndex[N, E] = AdjacencyIndex.build(nodes, edges)
        self._cycle_finder = cycle_finder or ExhaustiveDepthFirstSearchCycleFinder()

    @classmethod
    def from_graph(cls, graph: Graph[N, E]) -> Self:
        """Copies another graph's nodes, edges and cycle finder."""
        return cls(graph.node_order, graph.edge_order, cycle_finder=graph.cycle_finder)

    def _derive(self, index: AdjacencyIndex[N, E]) -> Self:
        clone = copy.copy(self)
        clone._index = index
        return clone

    def _stable(self) -> Graph[N, E]:
        """The graph analyses run against. Mutable subclasses pin a snapshot."""
        return self

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def cycle_finder(self) -> CycleFinder:
        return self._cycle_finder

    @property
    def nodes(self) -> frozenset[N]:
        return self._index.nodes

    @property
    def edges(self) -> frozenset[E]:
        return self._index.edges

    @property
    def node_order(self) -> tuple[N, ...]:
        """Nodes in construction order."""
        return self._index.node_order

    @property
    def edge_order(self) -> tuple[E, ...]:
        """Edges in construction order."""
        return self._index.edge_order

    @property
    def order(self) -> int:
        """Number of nodes."""
        return len(self._index.nodes)

    @property
    def size(self) -> int:
        """Number of edges."""
        return len(self._index.edge_order)

    def has_node(self, node: N) -> bool:
        return self._index.has_node(node)

    def has_edge(self, edge: E) -> bool:
        return self._index.has_edge(edge)

    def __contains__(self, element: object) -> bool:
        if isinstance(element, Edge):
            return self._index.has_edge(element)
        return self._index.has_node(element)

    def adjacent_edges(self, node: N) -> frozenset[E]:
        """Edges incident to `node`. Empty for a node not in the graph."""
        return self._index.adjacent_edges(node)

    def adjacent_nodes(self, node: N) -> tuple[N, ...]:
        """
        Neighbours of `node`, one entry per incident edge and other endpoint.

        Parallel edges repeat a neighbour and a self-loop lists the node
        itself. Empty for a node not in the graph.
        """
        return self._index.adjacent_nodes(node)

    def traversable_edges(self, node: N) -> frozenset[E]:
        return frozenset(
            edge for edge in self._index.adjacent_edges(node) if edge.is_traversable(node)
        )

    def traversable_nodes(self, node: N) -> tuple[N, ...]:
        return tuple(
            target
            for edge in self._index.adjacent_edges(node)
            for target in edge.traversable_nodes(node)
        )

    def degree(self, node: N) -> int:
        """
        Number of (incident edge, endpoint equal to `node`) pairs.

        A self-loop counts twice, each parallel edge once.
        """
        return sum(
            1
            for edge in self._index.adjacent_edges(node)
            for endpoint in edge.nodes
            if endpoint == node
        )

    def outdegree(self, node: N) -> int:
        """Number of incident edges traversable away from `node`."""
        return sum(
            1 for edge in self._index.adjacent_edges(node) if edge.is_traversable(node)
        )

    def indegree(self, node: N) -> int:
        """Number of incident edges traversable into `node` from another endpoint."""
        return sum(
            1
            for edge in self._index.adjacent_edges(node)
            if any(
                node in edge.traversable_nodes(other)
                for other in set(edge.nodes)
                if other != node
            )
        )

    def total_degree(self) -> int:
        """Sum of all node degrees, which equals the sum of edge ranks."""
        index = self._index
        return sum(edge.rank for edge in index.edge_order)

    # =========================================================================
    # Connectivity
    # =========================================================================

    def is_weakly_connected(self, left: N | None = None, right: N | None = None) -> bool:
        """
        Without arguments: whether the whole graph is weakly connected.
        With two nodes: whether `right` is reachable from `left` ignoring
        traversability.
        """
        graph = self._stable()
        if left is None and right is None:
            return connectivity.is_weakly_connected(graph)
        if left is None or right is None:
            raise InvalidArgumentError("left and right must be given together")
        return connectivity.is_weakly_connected_pair(graph, left, right)

    def is_strongly_connected(
        self, left: N | None = None, right: N | None = None
    ) -> bool:
        """Like is_weakly_connected, following traversable edges only."""
        graph = self._stable()
        if left is None and right is None:
            return connectivity.is_strongly_connected(graph)
        if left is None or right is None:
            raise InvalidArgumentError("left and right must be given together")
        return connectivity.is_strongly_connected_pair(graph, left, right)

    def is_cut(
        self,
        nodes: Iterable[N] = (),
        edges: Iterable[E] = (),
        begin: N | None = None,
        end: N | None = None,
    ) -> bool:
        """See cowgraph.connectivity.is_cut."""
        return connectivity.is_cut(self._stable(), nodes, edges, begin, end)

    def node_connectivity(
        self,
        begin: N | None = None,
        end: N | None = None,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> int:
        return connectivity.node_connectivity(
            self._stable(), begin, end, timeout=timeout, cancel=cancel
        )

    def edge_connectivity(
        self,
        begin: N | None = None,
        end: N | None = None,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> int:
        return connectivity.edge_connectivity(
            self._stable(), begin, end, timeout=timeout, cancel=cancel
        )

    def maximally_connected_components(self) -> frozenset[Graph[N, E]]:
        return connectivity.maximally_connected_components(self._stable())

    def is_knot(self, nodes: Iterable[N], edges: Iterable[E] | None = None) -> bool:
        return connectivity.is_knot(self._stable(), nodes, edges)

    # =========================================================================
    # Cycles
    # =========================================================================

    def cycles(self) -> frozenset[Cycle[N]]:
        return self._cycle_finder.cycles(self._stable())

    def is_acyclic(self) -> bool:
        return not self._cycle_finder.has_cycle(self._stable())

    def cycle_count(self) -> int:
        return self._cycle_finder.cycle_count(self._stable())

    def girth(self) -> int:
        return self._cycle_finder.girth(self._stable())

    def circumference(self) -> int:
        return self._cycle_finder.circumference(self._stable())

    def is_pancyclic(self) -> bool:
        return self._cycle_finder.is_pancyclic(self._stable())

    def is_unicyclic(self) -> bool:
        return self._cycle_finder.is_unicyclic(self._stable())

    # =========================================================================
    # Structure
    # =========================================================================

    def is_simple(self) -> bool:
        return structure.is_simple(self._stable())

    def is_regular(self) -> bool:
        return structure.is_regular(self._stable())

    def regular_degree(self) -> int:
        return structure.regular_degree(self._stable())

    def minimum_degree(self) -> int:
        return structure.minimum_degree(self._stable())

    def is_complete(self) -> bool:
        return structure.is_complete(self._stable())

    def is_multigraph(self) -> bool:
        return structure.is_multigraph(self._stable())

    def multiplicity(self, edge: E | None = None) -> int:
        """Multiplicity of `edge`, or the largest multiplicity in the graph."""
        if edge is None:
            return structure.multiplicity(self._stable())
        return structure.edge_multiplicity(self._stable(), edge)

    def is_multiple(self, edge: E) -> bool:
        return structure.is_multiple(self._stable(), edge)

    def rank(self) -> int:
        return structure.rank(self._stable())

    def is_uniform(self) -> bool:
        return structure.is_uniform(self._stable())

    def is_tree(self) -> bool:
        return structure.is_tree(self._stable())

    def is_forest(self) -> bool:
        return structure.is_forest(self._stable())

    def is_spanning_tree(self, candidate: Graph[N, E]) -> bool:
        return structure.is_spanning_tree(self._stable(), candidate._stable())

    def is_sub_graph(self, subgraph: Graph[N, E]) -> bool:
        return structure.is_sub_graph(self._stable(), subgraph._stable())

    def is_maximal_subgraph(self, subgraph: Graph[N, E]) -> bool:
        return structure.is_maximal_subgraph(self._stable(), subgraph._stable())

    def is_homomorphic(self, other: Graph[N, E]) -> bool:
        return structure.is_homomorphic(self._stable(), other._stable())

    def is_isomorphic(self, other: Graph[N, E]) -> bool:
        return structure.is_isomorphic(self._stable(), other._stable())

    # =========================================================================
    # Copy-on-write mutation
    # =========================================================================

    def _check_new_edge(self, index: AdjacencyIndex[N, E], edge: E) -> None:
        if edge is None:
            raise InvalidArgumentError("edge can not be None")
        missing = [node for node in edge.nodes if not index.has_node(node)]
        if missing:
            raise InvalidArgumentError(
                f"edge {edge} has endpoints not in the graph: {missing!r}"
            )

    def clone_add_edge(self, edge: E) -> Self | None:
        """
        A new graph with `edge` added, or None if it is already present.

        The adjacency index is extended incrementally.

        Raises:
            InvalidArgumentError: If `edge` is None or has an endpoint that is
                not a node of this graph.
        """
        index = self._index
        self._check_new_edge(index, edge)
        if index.has_edge(edge):
            return None
        return self._derive(index.with_edge(edge))

    def clone_add_node(self, node: N) -> Self | None:
        """A new graph with `node` added, or None if it is already present."""
        if node is None:
            raise InvalidArgumentError("node can not be None")
        index = self._index
        if index.has_node(node):
            return None
        return self._derive(index.with_node(node))

    def clone_add(self, nodes: Iterable[N] = (), edges: Iterable[E] = ()) -> Self | None:
        """
        A new graph with the given nodes and edges added.

        Elements already present are skipped; returns None when nothing is
        new. Edge endpoints may be existing or newly added nodes.
        """
        index = self._index
        new_nodes = [node for node in dict.fromkeys(nodes) if not index.has_node(node)]
        new_edges = [edge for edge in dict.fromkeys(edges) if not index.has_edge(edge)]
        if not new_nodes and not new_edges:
            return None
        for node in new_nodes:
            if node is None:
                raise InvalidArgumentError("node can not be None")
            index = index.with_node(node)
        for edge in new_edges:
            self._check_new_edge(index, edge)
            index = index.with_edge(edge)
        return self._derive(index)

    def clone_remove_edge(self, edge: E) -> Self | None:
        """A new graph without `edge`, or None if it is not present."""
        if edge is None:
            raise InvalidArgumentError("edge can not be None")
        index = self._index
        if not index.has_edge(edge):
            return None
        return self._derive(index.without_edge(edge))

    def clone_remove_node(self, node: N) -> Self | None:
        """
        A new graph without `node`, or None if it is not present.

        Incident edges lose every occurrence of `node`; those left with fewer
        than 2 endpoints are dropped.
        """
        if node is None:
            raise InvalidArgumentError("node can not be None")
        if not self._index.has_node(node):
            return None
        return self.residual([node])

    def clone_remove(
        self, nodes: Iterable[N] = (), edges: Iterable[E] = ()
    ) -> Self | None:
        """
        A new graph without the given nodes and edges.

        Elements not in the graph are ignored; returns None when nothing
        would be removed.
        """
        index = self._index
        removed_nodes = [node for node in nodes if index.has_node(node)]
        removed_edges = [edge for edge in edges if index.has_edge(edge)]
        if not removed_nodes and not removed_edges:
            return None
        return self.residual(removed_nodes, removed_edges)

    def residual(self, nodes: Iterable[N] = (), edges: Iterable[E] = ()) -> Self:
        """
        The graph left after deleting `nodes` and `edges`.

        Always returns a new graph. Edges touching a deleted node are replaced
        by copies without it (`Edge.without`), or dropped when fewer than 2
        endpoints remain. A directed edge that loses its source is dropped
        even if several destinations remain. Untouched edges keep their
        identity.
        """
        index = self._index
        removed_nodes = frozenset(nodes)
        removed_edges = frozenset(edges)

        kept_nodes = [node for node in index.node_order if node not in removed_nodes]
        kept_edges: list[E] = []
        for edge in index.edge_order:
            if edge in removed_edges:
                continue
            touched = removed_nodes.intersection(edge.nodes)
            derived = edge.without(touched) if touched else edge
            if derived is not None:
                kept_edges.append(derived)

        logger.debug(
            f"Residual graph: -{len(removed_nodes)} nodes, -{len(removed_edges)} "
            f"edges, {len(kept_edges)} edges kept"
        )
        return self._derive(AdjacencyIndex.build(kept_nodes, kept_edges))

    def subgraph(self, nodes: Iterable[N]) -> Self:
        """
        The subgraph induced by `nodes`: those nodes and every edge whose
        endpoints all belong to them.

        Raises:
            InvalidArgumentError: If a node is not part of the graph.
        """
        index = self._index
        keep = frozenset(nodes)
        missing = [node for node in keep if not index.has_node(node)]
        if missing:
            raise InvalidArgumentError(f"nodes not in the graph: {missing!r}")
        kept_nodes = [node for node in index.node_order if node in keep]
        kept_edges = [edge for edge in index.edge_order if keep.issuperset(edge.nodes)]
        return self._derive(AdjacencyIndex.build(kept_nodes, kept_edges))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(order={self.order}, size={self.size})"

    def __str__(self) -> str:
        nodes = ", ".join(str(node) for node in self.node_order)
        edges = ", ".join(str(edge) for edge in self.edge_order)
        return f"({{{nodes}}}, {{{edges}}})"
