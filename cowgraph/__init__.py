"""
cowgraph: an adjacency-list graph engine with copy-on-write derivation.

Graphs hold opaque hashable nodes and identity-distinct edges, which may be
directed, undirected, hyperedges, self-loops or parallel edges. A `Graph` is
immutable: structural changes produce new graphs through the `clone_*`
operations. `MutableGraph` offers in-place changes with the same invariants.

Example Usage:
    >>> from cowgraph import Graph, undirected
    >>> a_b, b_c = undirected("A", "B"), undirected("B", "C")
    >>> path = Graph({"A", "B", "C"}, {a_b, b_c})
    >>> path.is_cut({"B"})
    True
    >>> path.node_connectivity()
    1
    >>> triangle = path.clone_add_edge(undirected("C", "A"))
    >>> triangle.girth(), path.is_acyclic()
    (3, True)
"""

from cowgraph.adjacency import AdjacencyIndex
from cowgraph.budget import SearchBudget
from cowgraph.cycles import Cycle, CycleFinder, ExhaustiveDepthFirstSearchCycleFinder
from cowgraph.edges import DirectedEdge, Edge, UndirectedEdge, directed, undirected
from cowgraph.errors import (
    GraphError,
    InvalidArgumentError,
    InvalidStateError,
    SearchCancelledError,
    SearchTimeoutError,
)
from cowgraph.graph import Graph
from cowgraph.membership import GraphMember
from cowgraph.mutable import MutableGraph

__all__ = [
    # Edges
    "Edge",
    "UndirectedEdge",
    "DirectedEdge",
    "undirected",
    "directed",
    # Graphs
    "AdjacencyIndex",
    "Graph",
    "MutableGraph",
    "GraphMember",
    # Cycles
    "Cycle",
    "CycleFinder",
    "ExhaustiveDepthFirstSearchCycleFinder",
    # Search control
    "SearchBudget",
    # Errors
    "GraphError",
    "InvalidArgumentError",
    "InvalidStateError",
    "SearchCancelledError",
    "SearchTimeoutError",
]
