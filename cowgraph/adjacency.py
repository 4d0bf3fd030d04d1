"""
Adjacency index: node -> incident edges and node -> neighbours.

The index is immutable. Its per-node entries are frozensets and tuples, so a
derived index (one edge or node more or less) copies the two top-level dicts
and replaces only the entries the change touches; everything else is shared
with the parent index.

Construction, for every edge and every endpoint position i:
    - the edge is added to adjacent_edges[endpoint_i]
    - every endpoint_j with j != i is appended to adjacent_nodes[endpoint_i]

Duplicates in adjacent_nodes are intentional: a parallel edge contributes its
neighbour once per edge, and a self-loop (A, A) contributes A twice to A.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Generic, TypeVar

from cowgraph.edges import Edge
from cowgraph.errors import InvalidArgumentError

N = TypeVar("N")
E = TypeVar("E", bound=Edge)


def _neighbours_by_position(edge: Edge) -> Iterable[tuple[object, tuple]]:
    """Yields (endpoint_i, endpoints_j for j != i) for each endpoint position."""
    endpoints = edge.nodes
    for i, start in enumerate(endpoints):
        yield start, endpoints[:i] + endpoints[i + 1 :]


class AdjacencyIndex(Generic[N, E]):
    """
    Immutable adjacency lists over a node set and an edge set.

    Node and edge insertion order is preserved so traversals are
    deterministic for a given construction order.
    """

    __slots__ = ("_edges", "_adjacent_edges", "_adjacent_nodes", "_nodes")

    def __init__(
        self,
        edges: Mapping[E, None],
        adjacent_edges: Mapping[N, frozenset[E]],
        adjacent_nodes: Mapping[N, tuple[N, ...]],
    ) -> None:
        self._edges = edges
        self._adjacent_edges = adjacent_edges
        self._adjacent_nodes = adjacent_nodes
        self._nodes: frozenset[N] | None = None

    @classmethod
    def build(cls, nodes: Iterable[N], edges: Iterable[E]) -> AdjacencyIndex[N, E]:
        """
        Builds the index from scratch.

        Raises:
            InvalidArgumentError: If a node or edge is None, or an edge has an
                endpoint missing from `nodes`.
        """
        adjacent_edges: dict[N, set[E]] = {}
        adjacent_nodes: dict[N, list[N]] = {}
        for node in nodes:
            if node is None:
                raise InvalidArgumentError("nodes can not contain None")
            adjacent_edges.setdefault(node, set())
            adjacent_nodes.setdefault(node, [])

        edge_order: dict[E, None] = {}
        for edge in edges:
            if edge is None:
                raise InvalidArgumentError("edges can not contain None")
            if edge in edge_order:
                continue
            edge_order[edge] = None
            for start, others in _neighbours_by_position(edge):
                if start not in adjacent_edges:
                    raise InvalidArgumentError(
                        f"endpoint {start!r} of edge {edge} is not in the node set"
                    )
                adjacent_edges[start].add(edge)
                adjacent_nodes[start].extend(others)

        return cls(
            edge_order,
            {node: frozenset(incident) for node, incident in adjacent_edges.items()},
            {node: tuple(neighbours) for node, neighbours in adjacent_nodes.items()},
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> frozenset[N]:
        if self._nodes is None:
            self._nodes = frozenset(self._adjacent_edges)
        return self._nodes

    @property
    def edges(self) -> frozenset[E]:
        return frozenset(self._edges)

    @property
    def node_order(self) -> tuple[N, ...]:
        return tuple(self._adjacent_edges)

    @property
    def edge_order(self) -> tuple[E, ...]:
        return tuple(self._edges)

    def has_node(self, node: N) -> bool:
        return node in self._adjacent_edges

    def has_edge(self, edge: E) -> bool:
        return edge in self._edges

    def adjacent_edges(self, node: N) -> frozenset[E]:
        """Edges incident to `node`; empty for an unknown node."""
        return self._adjacent_edges.get(node, frozenset())

    def adjacent_nodes(self, node: N) -> tuple[N, ...]:
        """Neighbours of `node` with multiplicity; empty for an unknown node."""
        return self._adjacent_nodes.get(node, ())

    # -------------------------------------------------------------------------
    # Derivations
    # -------------------------------------------------------------------------

    def with_edge(self, edge: E) -> AdjacencyIndex[N, E]:
        """
        Returns an index extended by `edge`, sharing untouched entries.

        The caller checks that the edge is new and its endpoints are known.
        """
        edges = dict(self._edges)
        edges[edge] = None
        adjacent_edges = dict(self._adjacent_edges)
        adjacent_nodes = dict(self._adjacent_nodes)
        for start, others in _neighbours_by_position(edge):
            adjacent_edges[start] = adjacent_edges[start] | {edge}
            adjacent_nodes[start] = adjacent_nodes[start] + others
        return AdjacencyIndex(edges, adjacent_edges, adjacent_nodes)

    def with_node(self, node: N) -> AdjacencyIndex[N, E]:
        """Returns an index with an extra isolated node."""
        adjacent_edges = dict(self._adjacent_edges)
        adjacent_nodes = dict(self._adjacent_nodes)
        adjacent_edges[node] = frozenset()
        adjacent_nodes[node] = ()
        return AdjacencyIndex(self._edges, adjacent_edges, adjacent_nodes)

    def without_edge(self, edge: E) -> AdjacencyIndex[N, E]:
        """
        Returns an index without `edge`, sharing untouched entries.

        One occurrence of each other endpoint is dropped from every endpoint's
        neighbour list, which undoes exactly what `with_edge` appended.
        """
        edges = dict(self._edges)
        del edges[edge]
        adjacent_edges = dict(self._adjacent_edges)
        adjacent_nodes = dict(self._adjacent_nodes)
        for start, others in _neighbours_by_position(edge):
            adjacent_edges[start] = adjacent_edges[start] - {edge}
            neighbours = list(adjacent_nodes[start])
            for other in others:
                neighbours.remove(other)
            adjacent_nodes[start] = tuple(neighbours)
        return AdjacencyIndex(edges, adjacent_edges, adjacent_nodes)

    def __repr__(self) -> str:
        return (
            f"AdjacencyIndex(nodes={len(self._adjacent_edges)}, "
            f"edges={len(self._edges)})"
        )
