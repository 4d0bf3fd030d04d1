"""Tests for cowgraph/cycles.py"""

import pytest

from cowgraph import (
    CycleFinder,
    ExhaustiveDepthFirstSearchCycleFinder,
    Graph,
    SearchTimeoutError,
)
from cowgraph.edges import directed, undirected


def complete_graph(nodes, **kwargs):
    nodes = list(nodes)
    edges = [
        undirected(left, right)
        for i, left in enumerate(nodes)
        for right in nodes[i + 1 :]
    ]
    return Graph(nodes, edges, **kwargs)


@pytest.fixture
def triangle():
    return complete_graph("ABC")


@pytest.fixture
def square_with_diagonal():
    return Graph(
        "ABCD",
        [
            undirected("A", "B"),
            undirected("B", "C"),
            undirected("C", "D"),
            undirected("D", "A"),
            undirected("A", "C"),
        ],
    )


class TestUndirected:
    def test_triangle(self, triangle):
        assert not triangle.is_acyclic()
        assert triangle.cycle_count() == 1
        assert triangle.girth() == 3
        assert triangle.circumference() == 3
        assert triangle.is_unicyclic()
        assert triangle.is_pancyclic()

    def test_square_with_diagonal(self, square_with_diagonal):
        graph = square_with_diagonal
        assert graph.cycle_count() == 3
        assert graph.girth() == 3
        assert graph.circumference() == 4
        assert graph.is_pancyclic()
        assert not graph.is_unicyclic()

    def test_k4(self):
        graph = complete_graph("ABCD")
        assert graph.cycle_count() == 7
        assert sorted(len(cycle) for cycle in graph.cycles()) == [3, 3, 3, 3, 4, 4, 4]

    def test_path_is_acyclic(self):
        graph = Graph("ABC", [undirected("A", "B"), undirected("B", "C")])
        assert graph.is_acyclic()
        assert graph.cycle_count() == 0
        assert graph.girth() == 0
        assert graph.circumference() == 0
        assert not graph.is_pancyclic()
        assert not graph.is_unicyclic()

    def test_self_loop(self):
        graph = Graph("AB", [undirected("A", "A"), undirected("A", "B")])
        assert graph.cycle_count() == 1
        assert graph.girth() == 1

    def test_parallel_edges(self):
        graph = Graph("AB", [undirected("A", "B"), undirected("A", "B")])
        (cycle,) = graph.cycles()
        assert len(cycle) == 2
        assert set(cycle.nodes) == {"A", "B"}

    def test_hyperedge_alone_is_acyclic(self):
        graph = Graph("ABC", [undirected("A", "B", "C")])
        assert graph.is_acyclic()

    def test_not_pancyclic(self):
        """A triangle and a pentagon sharing a node: lengths 3 and 5 only."""
        graph = Graph(
            "ABCDEFG",
            [
                undirected("A", "B"),
                undirected("B", "C"),
                undirected("C", "A"),
                undirected("A", "D"),
                undirected("D", "E"),
                undirected("E", "F"),
                undirected("F", "G"),
                undirected("G", "A"),
            ],
        )
        assert graph.girth() == 3
        assert graph.circumference() == 5
        assert not graph.is_pancyclic()


class TestDirected:
    def test_two_cycle(self):
        graph = Graph("AB", [directed("A", "B"), directed("B", "A")])
        assert graph.cycle_count() == 1
        assert graph.girth() == 2

    def test_dag(self):
        graph = Graph("ABC", [directed("A", "B"), directed("A", "C"), directed("B", "C")])
        assert graph.is_acyclic()
        assert graph.cycles() == frozenset()

    def test_direction_matters(self):
        graph = Graph("ABC", [directed("A", "B"), directed("B", "C"), directed("C", "A")])
        assert graph.cycle_count() == 1
        reversed_edge = Graph(
            "ABC", [directed("A", "B"), directed("B", "C"), directed("A", "C")]
        )
        assert reversed_edge.is_acyclic()


class TestCycleShape:
    def test_walk_order(self, square_with_diagonal):
        for cycle in square_with_diagonal.cycles():
            assert len(cycle.nodes) == len(cycle.edges)
            assert len(set(cycle.nodes)) == len(cycle.nodes)
            for i, edge in enumerate(cycle.edges):
                here = cycle.nodes[i]
                there = cycle.nodes[(i + 1) % len(cycle.nodes)]
                assert there in edge.traversable_nodes(here)

    def test_str(self, triangle):
        (cycle,) = triangle.cycles()
        text = str(cycle)
        assert text.count("~") == 3


class EmptyCycleFinder(CycleFinder):
    """Reports no cycles and records which graphs it saw."""

    def __init__(self):
        self.seen = []

    def cycles(self, graph):
        self.seen.append(graph)
        return frozenset()


class TestCycleFinder:
    def test_default_finder(self, triangle):
        assert isinstance(triangle.cycle_finder, ExhaustiveDepthFirstSearchCycleFinder)

    def test_pluggable(self):
        finder = EmptyCycleFinder()
        graph = complete_graph("ABC", cycle_finder=finder)
        assert graph.is_acyclic()
        assert graph.girth() == 0
        assert finder.seen

    def test_inherited_by_derived_graphs(self):
        finder = EmptyCycleFinder()
        graph = complete_graph("ABC", cycle_finder=finder)
        derived = graph.clone_add_node("D")
        assert derived.cycle_finder is finder
        assert graph.residual({"A"}).cycle_finder is finder

    def test_timeout(self):
        finder = ExhaustiveDepthFirstSearchCycleFinder(timeout=0)
        graph = complete_graph("ABCD", cycle_finder=finder)
        with pytest.raises(SearchTimeoutError):
            graph.cycles()
