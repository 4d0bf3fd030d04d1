"""
Cycle finding.

A cycle is a closed walk n0 -e0- n1 -e1- ... -e(k-1)- n0 over distinct nodes
and distinct edges where each step follows a traversable edge. Its length is
the number of edges k, so a self-loop is a cycle of length 1, a pair of
parallel undirected edges a cycle of length 2, and a simple undirected graph
without self-loops has no cycle shorter than 3.

`CycleFinder` derives every statistic (count, girth, circumference, pancyclic,
unicyclic) from `cycles()`; implementations only need to enumerate.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from cowgraph.budget import SearchBudget
from cowgraph.constants import EXHAUSTIVE_SEARCH_WARNING_SIZE
from cowgraph.edges import Edge

if TYPE_CHECKING:
    from cowgraph.graph import Graph

logger = logging.getLogger(__name__)

N = TypeVar("N")


@dataclass(frozen=True)
class Cycle(Generic[N]):
    """
    A simple cycle in walk order.

    Attributes:
        nodes: Nodes visited, starting node first and not repeated at the end.
        edges: edges[i] leads from nodes[i] to nodes[i + 1] (wrapping around).
    """

    nodes: tuple[N, ...]
    edges: tuple[Edge[N], ...]

    def __len__(self) -> int:
        return len(self.edges)

    def __str__(self) -> str:
        return " ~ ".join(str(node) for node in self.nodes + self.nodes[:1])


class CycleFinder(ABC):
    """Pluggable cycle analysis used by Graph."""

    @abstractmethod
    def cycles(self, graph: Graph) -> frozenset[Cycle]:
        """Every simple cycle of `graph`, each reported once."""
        ...

    def has_cycle(self, graph: Graph) -> bool:
        return bool(self.cycles(graph))

    def cycle_count(self, graph: Graph) -> int:
        return len(self.cycles(graph))

    def girth(self, graph: Graph) -> int:
        """Length of the shortest cycle, 0 if the graph is acyclic."""
        return min((len(cycle) for cycle in self.cycles(graph)), default=0)

    def circumference(self, graph: Graph) -> int:
        """Length of the longest cycle, 0 if the graph is acyclic."""
        return max((len(cycle) for cycle in self.cycles(graph)), default=0)

    def is_pancyclic(self, graph: Graph) -> bool:
        """True if cycles of every length from girth to circumference exist."""
        lengths = {len(cycle) for cycle in self.cycles(graph)}
        if not lengths:
            return False
        return lengths == set(range(min(lengths), max(lengths) + 1))

    def is_unicyclic(self, graph: Graph) -> bool:
        return self.cycle_count(graph) == 1


class ExhaustiveDepthFirstSearchCycleFinder(CycleFinder):
    """
    Enumerates all simple cycles with a depth-first search from every node.

    A search started at a node only visits nodes that come later in the
    graph's node order, so each cycle is reached from its earliest node only.
    The remaining duplicates (both walking directions of an undirected cycle)
    are merged on the cycle's node and edge sets.

    Exponential in the worst case. The optional timeout and cancel event bound
    every call.
    """

    def __init__(
        self,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.timeout = timeout
        self.cancel = cancel

    def _walk(self, graph: Graph) -> Iterator[Cycle]:
        budget = SearchBudget.create(self.timeout, self.cancel)
        node_order = graph.node_order
        if len(node_order) >= EXHAUSTIVE_SEARCH_WARNING_SIZE:
            logger.warning(
                f"Exhaustive cycle search over {len(node_order)} nodes may be slow"
            )
        position = {node: i for i, node in enumerate(node_order)}

        for start in node_order:
            stack: list[tuple[Any, tuple[Any, ...], tuple[Edge, ...]]] = [
                (start, (start,), ())
            ]
            while stack:
                current, path_nodes, path_edges = stack.pop()
                budget.check()
                for edge in graph.traversable_edges(current):
                    if edge in path_edges:
                        continue
                    for target in set(edge.traversable_nodes(current)):
                        if target == start:
                            yield Cycle(path_nodes, path_edges + (edge,))
                        elif (
                            position[target] > position[start]
                            and target not in path_nodes
                        ):
                            stack.append(
                                (target, path_nodes + (target,), path_edges + (edge,))
                            )

    def cycles(self, graph: Graph) -> frozenset[Cycle]:
        found: dict[tuple[frozenset, frozenset], Cycle] = {}
        for cycle in self._walk(graph):
            key = (frozenset(cycle.nodes), frozenset(cycle.edges))
            found.setdefault(key, cycle)
        logger.debug(f"Found {len(found)} cycles")
        return frozenset(found.values())

    def has_cycle(self, graph: Graph) -> bool:
        return next(self._walk(graph), None) is not None
