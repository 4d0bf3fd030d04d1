"""
Structural predicates: simplicity, regularity, multiplicity, trees and
sub/homo/isomorphism.

Homomorphism and isomorphism here are identity based: nodes of the two graphs
are matched by equality, never by searching for a vertex mapping. Two graphs
over disjoint node values are therefore never isomorphic, even when they have
the same shape.
"""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from cowgraph.errors import InvalidArgumentError, InvalidStateError

if TYPE_CHECKING:
    from cowgraph.edges import Edge
    from cowgraph.graph import Graph


# =============================================================================
# Degrees
# =============================================================================


def is_simple(graph: Graph) -> bool:
    """True if no adjacency list holds a node twice (no loops, no multi-edges)."""
    for node in graph.nodes:
        neighbours = graph.adjacent_nodes(node)
        if len(neighbours) != len(set(neighbours)):
            return False
    return True


def regular_degree(graph: Graph) -> int:
    """
    The degree shared by every node, or -1 if degrees differ.

    Raises:
        InvalidStateError: If the graph has no nodes.
    """
    degrees = {graph.degree(node) for node in graph.nodes}
    if not degrees:
        raise InvalidStateError("graph has no nodes")
    if len(degrees) > 1:
        return -1
    return degrees.pop()


def is_regular(graph: Graph) -> bool:
    """True if every node has the same degree. An empty graph is regular."""
    return len({graph.degree(node) for node in graph.nodes}) <= 1


def minimum_degree(graph: Graph) -> int:
    """
    Raises:
        InvalidStateError: If the graph has no nodes.
    """
    if not graph.nodes:
        raise InvalidStateError("graph has no nodes")
    return min(graph.degree(node) for node in graph.nodes)


def is_complete(graph: Graph) -> bool:
    """True if the graph is simple and every distinct node pair is adjacent."""
    if not is_simple(graph):
        return False
    nodes = graph.nodes
    return all(
        set(graph.adjacent_nodes(node)) >= nodes - {node} for node in nodes
    )


# =============================================================================
# Multiplicity
# =============================================================================


def _parallel_edges(graph: Graph, edge: Edge) -> list[Edge]:
    if not graph.has_edge(edge):
        raise InvalidArgumentError(f"edge {edge} is not part of the graph")
    endpoints = frozenset(edge.nodes)
    return [
        other
        for other in graph.adjacent_edges(edge.nodes[0])
        if other is not edge and frozenset(other.nodes) == endpoints
    ]


def edge_multiplicity(graph: Graph, edge: Edge) -> int:
    """
    Number of other edges with the same endpoint set as `edge`.

    Endpoints are compared as sets, so order and direction are ignored, and
    edges of different rank over the same nodes, such as (A, B) and
    (A, A, B), count as parallel.

    Raises:
        InvalidArgumentError: If `edge` is not part of the graph.
    """
    return len(_parallel_edges(graph, edge))


def is_multiple(graph: Graph, edge: Edge) -> bool:
    """
    Raises:
        InvalidArgumentError: If `edge` is not part of the graph.
    """
    return bool(_parallel_edges(graph, edge))


def multiplicity(graph: Graph) -> int:
    """Largest multiplicity of any edge, 0 for a graph without edges."""
    return max((edge_multiplicity(graph, edge) for edge in graph.edges), default=0)


def is_multigraph(graph: Graph) -> bool:
    """True if two nodes are joined more than once. Self-loops are ignored."""
    for node in graph.nodes:
        counts = Counter(
            neighbour for neighbour in graph.adjacent_nodes(node) if neighbour != node
        )
        if any(count > 1 for count in counts.values()):
            return True
    return False


# =============================================================================
# Hypergraph rank
# =============================================================================


def rank(graph: Graph) -> int:
    """Largest edge rank, 0 for a graph without edges."""
    return max((edge.rank for edge in graph.edges), default=0)


def is_uniform(graph: Graph) -> bool:
    """True if every edge has the same rank."""
    return len({edge.rank for edge in graph.edges}) <= 1


# =============================================================================
# Trees
# =============================================================================


def is_tree(graph: Graph) -> bool:
    return graph.is_weakly_connected() and graph.is_acyclic() and is_simple(graph)


def is_forest(graph: Graph) -> bool:
    """Every weakly connected component is a tree."""
    return graph.is_acyclic() and is_simple(graph)


def is_spanning_tree(graph: Graph, candidate: Graph) -> bool:
    """
    True if `candidate` is a tree over exactly the nodes of `graph`, built
    from edges of `graph`.
    """
    return (
        candidate.nodes == graph.nodes
        and is_sub_graph(graph, candidate)
        and is_tree(candidate)
    )


# =============================================================================
# Subgraphs and morphisms
# =============================================================================


def is_sub_graph(graph: Graph, subgraph: Graph) -> bool:
    """True if every node and edge of `subgraph` belongs to `graph`."""
    return subgraph.nodes <= graph.nodes and subgraph.edges <= graph.edges


def is_maximal_subgraph(graph: Graph, subgraph: Graph) -> bool:
    """
    True if `subgraph` is a subgraph and no edge of `graph` outside it touches
    one of its nodes.
    """
    if not is_sub_graph(graph, subgraph):
        return False
    subnodes = subgraph.nodes
    return not any(
        node in subnodes
        for edge in graph.edges - subgraph.edges
        for node in edge.nodes
    )


def is_homomorphic(source: Graph, target: Graph) -> bool:
    """
    True if every adjacency of `source` also exists in `target`.

    Every node with a neighbour in `source` must be a node of `target`, and
    each of its neighbours must appear in its adjacency list in `target`.
    """
    target_nodes = target.nodes
    for node in source.nodes:
        neighbours = source.adjacent_nodes(node)
        if not neighbours:
            continue
        if node not in target_nodes:
            return False
        mirrored = set(target.adjacent_nodes(node))
        if any(neighbour not in mirrored for neighbour in neighbours):
            return False
    return True


def is_isomorphic(left: Graph, right: Graph) -> bool:
    return is_homomorphic(left, right) and is_homomorphic(right, left)
