"""
Connectivity analysis: reachability, cuts and connectivity numbers.

Definitions:
    weak connection   - a path exists following adjacency, ignoring direction
    strong connection - a path exists following traversable edges only
    cut               - removing the given nodes and edges leaves a residual
                        graph that is not strongly connected (or, pairwise, in
                        which `end` is no longer strongly reachable from `begin`)

Connectivity numbers are the size of the smallest cut. The reference
algorithm enumerates subsets in increasing size, so it is exponential in the
number of candidates and only practical for small graphs. Edge connectivity of
graphs whose edges are all binary uses unit-capacity max-flow instead
(scipy.sparse.csgraph.maximum_flow), which yields the same number.

Every function reads a graph through its public query API only.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Sequence, Set
from itertools import chain, combinations
from typing import TYPE_CHECKING, Any, TypeVar

import numpy as np
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import maximum_flow

from cowgraph.budget import SearchBudget
from cowgraph.constants import EXHAUSTIVE_SEARCH_WARNING_SIZE
from cowgraph.errors import InvalidArgumentError
from cowgraph.utils.components import connected_components, is_reachable, reachable
from cowgraph.utils.union_find import UnionFind

if TYPE_CHECKING:
    from cowgraph.edges import Edge
    from cowgraph.graph import Graph

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Reachability
# =============================================================================


def is_weakly_connected_pair(graph: Graph, left: Any, right: Any) -> bool:
    """True if `right` is reachable from `left` over any adjacency."""
    if not (graph.has_node(left) and graph.has_node(right)):
        return False
    return is_reachable(left, right, graph.adjacent_nodes)


def is_strongly_connected_pair(graph: Graph, left: Any, right: Any) -> bool:
    """True if `right` is reachable from `left` over traversable edges."""
    if not (graph.has_node(left) and graph.has_node(right)):
        return False
    return is_reachable(left, right, graph.traversable_nodes)


def is_weakly_connected(graph: Graph) -> bool:
    """
    True if the graph has at most one node or every pair is weakly connected.

    Computed with one union-find pass over the edges rather than pairwise.
    """
    nodes = graph.nodes
    if len(nodes) <= 1:
        return True
    sets = UnionFind(nodes)
    for edge in graph.edges:
        first, *rest = edge.nodes
        for node in rest:
            sets.union(first, node)
    return len(sets) == 1


def is_strongly_connected(graph: Graph) -> bool:
    """True if every node can reach every other node over traversable edges."""
    nodes = graph.nodes
    if len(nodes) <= 1:
        return True
    return all(
        reachable(node, graph.traversable_nodes) >= nodes for node in nodes
    )


# =============================================================================
# Cuts
# =============================================================================


def _check_members(graph: Graph, nodes: Set[Any], edges: Set[Edge]) -> None:
    missing_nodes = [node for node in nodes if not graph.has_node(node)]
    if missing_nodes:
        raise InvalidArgumentError(f"nodes not in the graph: {missing_nodes!r}")
    missing_edges = [edge for edge in edges if not graph.has_edge(edge)]
    if missing_edges:
        raise InvalidArgumentError(
            f"edges not in the graph: {[str(e) for e in missing_edges]}"
        )


def _check_endpoints(graph: Graph, begin: Any, end: Any) -> bool:
    """Validates a begin/end pair. Returns True if the pair form applies."""
    if (begin is None) != (end is None):
        raise InvalidArgumentError("begin and end must be given together")
    if begin is None:
        return False
    if not (graph.has_node(begin) and graph.has_node(end)):
        raise InvalidArgumentError(f"{begin!r} and {end!r} must be graph nodes")
    return True


def is_cut(
    graph: Graph,
    nodes: Iterable[Any] = (),
    edges: Iterable[Edge] = (),
    begin: Any = None,
    end: Any = None,
) -> bool:
    """
    Tests whether removing `nodes` and `edges` disconnects the graph.

    The residual graph drops the removed elements; edges that lose endpoints
    but keep at least two are replaced by shrunken copies, except directed
    edges that lose their source, which are dropped. With `begin` and
    `end` the test is whether `end` stays strongly reachable from `begin`,
    otherwise whether the whole residual graph stays strongly connected.

    Raises:
        InvalidArgumentError: If an element is not part of the graph, or only
            one of `begin`/`end` is given.
    """
    removed_nodes = frozenset(nodes)
    removed_edges = frozenset(edges)
    _check_members(graph, removed_nodes, removed_edges)
    pairwise = _check_endpoints(graph, begin, end)

    residual = graph.residual(removed_nodes, removed_edges)
    if pairwise:
        return not is_strongly_connected_pair(residual, begin, end)
    return not is_strongly_connected(residual)


def _subsets_by_size(elements: Sequence[T]) -> Iterator[tuple[T, ...]]:
    """Every subset of `elements`, smallest first, the empty set included."""
    return chain.from_iterable(
        combinations(elements, r) for r in range(len(elements) + 1)
    )


def _smallest_cut(
    graph: Graph,
    candidates: Sequence[Any],
    as_nodes: bool,
    begin: Any,
    end: Any,
    fallback: int,
    budget: SearchBudget,
) -> int:
    kind = "node" if as_nodes else "edge"
    if len(candidates) >= EXHAUSTIVE_SEARCH_WARNING_SIZE:
        logger.warning(
            f"Exhaustive {kind} cut search over {len(candidates)} candidates "
            f"may take up to 2^{len(candidates)} steps"
        )

    size = -1
    for subset in _subsets_by_size(candidates):
        budget.check()
        if len(subset) != size:
            size = len(subset)
            logger.debug(f"Trying {kind} cuts of size {size}")
        removed_nodes = subset if as_nodes else ()
        removed_edges = () if as_nodes else subset
        if is_cut(graph, removed_nodes, removed_edges, begin, end):
            logger.debug(f"Smallest {kind} cut has size {size}")
            return size
    return fallback


def node_connectivity(
    graph: Graph,
    begin: Any = None,
    end: Any = None,
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> int:
    """
    Size of the smallest node set whose removal is a cut.

    In the pairwise form `begin` and `end` are never candidates themselves.
    Returns the node count when no subset is a cut.

    Raises:
        SearchTimeoutError, SearchCancelledError: When the budget trips.
    """
    pairwise = _check_endpoints(graph, begin, end)
    candidates = graph.node_order
    if pairwise:
        candidates = tuple(node for node in candidates if node not in (begin, end))
    return _smallest_cut(
        graph,
        candidates,
        as_nodes=True,
        begin=begin,
        end=end,
        fallback=graph.order,
        budget=SearchBudget.create(timeout, cancel),
    )


def edge_connectivity(
    graph: Graph,
    begin: Any = None,
    end: Any = None,
    *,
    timeout: float | None = None,
    cancel: threading.Event | None = None,
) -> int:
    """
    Size of the smallest edge set whose removal is a cut.

    Returns the edge count when no subset is a cut (at most one node, or
    `begin == end`).

    Raises:
        SearchTimeoutError, SearchCancelledError: When the budget trips.
    """
    pairwise = _check_endpoints(graph, begin, end)
    budget = SearchBudget.create(timeout, cancel)
    if pairwise and begin == end:
        return graph.size
    if all(edge.rank == 2 for edge in graph.edges):
        logger.debug("All edges are binary, using max-flow")
        return _max_flow_edge_connectivity(graph, begin, end, budget)
    return _smallest_cut(
        graph,
        graph.edge_order,
        as_nodes=False,
        begin=begin,
        end=end,
        fallback=graph.size,
        budget=budget,
    )


def _capacity_matrix(graph: Graph) -> tuple[csr_matrix, dict[Any, int]]:
    """Unit capacity per traversable direction of each binary edge."""
    position = {node: i for i, node in enumerate(graph.node_order)}
    rows: list[int] = []
    cols: list[int] = []
    for edge in graph.edges:
        for node in set(edge.nodes):
            for target in edge.traversable_nodes(node):
                if target != node:
                    rows.append(position[node])
                    cols.append(position[target])
    size = len(position)
    data = np.ones(len(rows), dtype=np.int32)
    # Parallel edges sum their capacities when duplicates are merged
    capacity = csr_matrix(
        (data, (np.array(rows, dtype=np.int32), np.array(cols, dtype=np.int32))),
        shape=(size, size),
        dtype=np.int32,
    )
    capacity.sum_duplicates()
    return capacity, position


def _max_flow_edge_connectivity(
    graph: Graph, begin: Any, end: Any, budget: SearchBudget
) -> int:
    nodes = graph.node_order
    if begin is None and len(nodes) <= 1:
        return graph.size
    if graph.size == 0:
        # At least two nodes and nothing joining them
        return 0

    capacity, position = _capacity_matrix(graph)

    def flow(source: Any, sink: Any) -> int:
        budget.check()
        return int(
            maximum_flow(capacity, position[source], position[sink]).flow_value
        )

    if begin is not None:
        return flow(begin, end)

    # Any cut separates the first node from some other node in one direction
    anchor = nodes[0]
    return min(
        min(flow(anchor, other), flow(other, anchor)) for other in nodes[1:]
    )


# =============================================================================
# Components and knots
# =============================================================================


def maximally_connected_components(graph: Graph) -> frozenset[Graph]:
    """The weakly connected components, each as an induced subgraph."""
    components = connected_components(graph.nodes, graph.adjacent_nodes)
    return frozenset(graph.subgraph(component) for component in components)


def is_knot(
    graph: Graph, nodes: Iterable[Any], edges: Iterable[Edge] | None = None
) -> bool:
    """
    Tests whether `nodes` form a knot.

    A knot is a non-empty node set that can be entered but never left: every
    node in it has a traversable edge, every traversable edge from it stays
    inside it, at least one traversable edge enters it from outside, and it is
    weakly connected among itself. When `edges` is given, internal weak
    connectivity is judged over those edges only and each of them must lie
    entirely inside the node set.

    Raises:
        InvalidArgumentError: If a node or edge is not part of the graph.
    """
    knot = frozenset(nodes)
    knot_edges = None if edges is None else frozenset(edges)
    _check_members(graph, knot, knot_edges or frozenset())
    if not knot:
        return False

    for node in knot:
        targets = graph.traversable_nodes(node)
        if not targets or any(target not in knot for target in targets):
            return False

    entered = any(
        target in knot
        for node in graph.nodes - knot
        for target in graph.traversable_nodes(node)
    )
    if not entered:
        return False

    if knot_edges is None:
        def neighbours(node: Any) -> Iterable[Any]:
            return graph.adjacent_nodes(node)
    else:
        if any(not knot.issuperset(edge.nodes) for edge in knot_edges):
            return False

        def neighbours(node: Any) -> Iterable[Any]:
            return (
                other
                for edge in knot_edges
                if node in edge.nodes
                for other in edge.nodes
            )

    return len(connected_components(knot, neighbours)) == 1
