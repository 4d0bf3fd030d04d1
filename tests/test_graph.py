"""
Tests for the Graph core: queries and copy-on-write mutation.
"""

import pytest

from cowgraph import Graph, InvalidArgumentError
from cowgraph.edges import directed, undirected


@pytest.fixture
def triangle():
    edges = [undirected("A", "B"), undirected("B", "C"), undirected("C", "A")]
    return Graph("ABC", edges)


@pytest.fixture
def path():
    """A -- B -- C"""
    return Graph("ABC", [undirected("A", "B"), undirected("B", "C")])


class TestConstruction:
    def test_missing_endpoint(self):
        with pytest.raises(InvalidArgumentError):
            Graph({"A"}, {undirected("A", "B")})

    def test_empty(self):
        graph = Graph()
        assert graph.nodes == frozenset()
        assert graph.edges == frozenset()
        assert graph.order == 0
        assert graph.size == 0

    def test_from_graph(self, triangle):
        copy = Graph.from_graph(triangle)
        assert copy is not triangle
        assert copy.nodes == triangle.nodes
        assert copy.edges == triangle.edges
        assert copy.cycle_finder is triangle.cycle_finder

    def test_contains(self, path):
        edge = next(iter(path.edges))
        assert "A" in path
        assert "Z" not in path
        assert edge in path
        assert undirected("A", "B") not in path

    def test_repr(self, path):
        assert repr(path) == "Graph(order=3, size=2)"


class TestQueries:
    def test_triangle_degrees(self, triangle):
        for node in "ABC":
            assert triangle.degree(node) == 2

    def test_self_loop_counts_twice(self):
        graph = Graph("A", [undirected("A", "A")])
        assert graph.degree("A") == 2

    def test_parallel_edges_count_once_each(self):
        graph = Graph("AB", [undirected("A", "B"), undirected("A", "B")])
        assert graph.degree("A") == 2
        assert graph.adjacent_nodes("A") == ("B", "B")

    def test_degree_sum_with_hyperedge(self):
        graph = Graph(
            "ABCD", [undirected("A", "B"), undirected("B", "C", "D"), directed("D", "A")]
        )
        assert sum(graph.degree(node) for node in graph.nodes) == 2 + 3 + 2
        assert graph.total_degree() == 7

    def test_unknown_node(self, path):
        assert path.adjacent_edges("Z") == frozenset()
        assert path.adjacent_nodes("Z") == ()
        assert path.degree("Z") == 0

    def test_traversable_directed(self):
        a_b = directed("A", "B")
        graph = Graph("AB", [a_b])
        assert graph.traversable_edges("A") == {a_b}
        assert graph.traversable_edges("B") == frozenset()
        assert graph.traversable_nodes("A") == ("B",)
        assert graph.traversable_nodes("B") == ()
        assert graph.adjacent_nodes("B") == ("A",)

    def test_in_and_out_degree(self):
        graph = Graph("ABC", [directed("A", "B"), directed("C", "B"), undirected("A", "C")])
        assert graph.outdegree("A") == 2
        assert graph.indegree("A") == 1
        assert graph.outdegree("B") == 0
        assert graph.indegree("B") == 2

    def test_returned_collections_are_immutable(self, path):
        assert isinstance(path.nodes, frozenset)
        assert isinstance(path.edges, frozenset)
        assert isinstance(path.adjacent_nodes("B"), tuple)


class TestCloneAddEdge:
    def test_adds_edge(self, path):
        before = set(path.edges)
        new_edge = undirected("C", "A")
        result = path.clone_add_edge(new_edge)

        assert result is not path
        assert result.edges == before | {new_edge}
        assert result.nodes == path.nodes
        assert "C" in result.adjacent_nodes("A")

    def test_original_untouched(self, path):
        before_edges = path.edges
        before_neighbours = {node: path.adjacent_nodes(node) for node in path.nodes}
        before_cyclic = path.is_acyclic()

        path.clone_add_edge(undirected("C", "A"))

        assert path.edges == before_edges
        assert {node: path.adjacent_nodes(node) for node in path.nodes} == before_neighbours
        assert path.is_acyclic() == before_cyclic

    def test_present_edge_returns_none(self, path):
        edge = next(iter(path.edges))
        assert path.clone_add_edge(edge) is None

    def test_none_edge(self, path):
        with pytest.raises(InvalidArgumentError):
            path.clone_add_edge(None)

    def test_unknown_endpoint(self, path):
        with pytest.raises(InvalidArgumentError, match="not in the graph"):
            path.clone_add_edge(undirected("A", "Z"))

    def test_matches_fresh_construction(self, path):
        new_edge = undirected("A", "C")
        result = path.clone_add_edge(new_edge)
        fresh = Graph(path.nodes, path.edges | {new_edge})
        for node in path.nodes:
            assert result.adjacent_edges(node) == fresh.adjacent_edges(node)
            assert sorted(result.adjacent_nodes(node)) == sorted(
                fresh.adjacent_nodes(node)
            )


class TestCloneAddNodes:
    def test_add_node(self, path):
        result = path.clone_add_node("D")
        assert result.nodes == {"A", "B", "C", "D"}
        assert result.edges == path.edges
        assert "D" not in path

    def test_add_present_node(self, path):
        assert path.clone_add_node("A") is None

    def test_add_none_node(self, path):
        with pytest.raises(InvalidArgumentError):
            path.clone_add_node(None)

    def test_add_nodes_and_edges(self, path):
        new_edge = undirected("C", "D")
        result = path.clone_add({"D"}, {new_edge})
        assert result.nodes == {"A", "B", "C", "D"}
        assert new_edge in result.edges
        assert result.is_tree()

    def test_add_nothing_new(self, path):
        assert path.clone_add({"A"}, path.edges) is None

    def test_add_edge_to_unknown_node(self, path):
        with pytest.raises(InvalidArgumentError):
            path.clone_add((), {undirected("C", "D")})


class TestCloneRemove:
    def test_remove_edge(self, path):
        edge = next(iter(path.adjacent_edges("A")))
        result = path.clone_remove_edge(edge)
        assert result.edges == path.edges - {edge}
        assert result.adjacent_nodes("A") == ()
        assert result.adjacent_nodes("B") == ("C",)
        assert edge in path.edges

    def test_remove_absent_edge(self, path):
        assert path.clone_remove_edge(undirected("A", "B")) is None

    def test_remove_none_edge(self, path):
        with pytest.raises(InvalidArgumentError):
            path.clone_remove_edge(None)

    def test_remove_node_drops_binary_edges(self, path):
        result = path.clone_remove_node("B")
        assert result.nodes == {"A", "C"}
        assert result.edges == frozenset()
        assert path.order == 3

    def test_remove_node_shrinks_hyperedge(self):
        graph = Graph("ABC", [undirected("A", "B", "C")])
        result = graph.clone_remove_node("A")
        (edge,) = result.edges
        assert edge.nodes == ("B", "C")
        assert result.adjacent_nodes("B") == ("C",)

    def test_remove_source_drops_directed_hyperedge(self):
        b_c = undirected("B", "C")
        graph = Graph("ABC", [directed("A", "B", "C"), b_c])
        result = graph.clone_remove_node("A")
        assert result.edges == {b_c}

    def test_remove_destination_shrinks_directed_hyperedge(self):
        graph = Graph("ABC", [directed("A", "B", "C")])
        result = graph.clone_remove_node("C")
        (edge,) = result.edges
        assert edge.source == "A"
        assert edge.destinations == ("B",)

    def test_remove_absent_node(self, path):
        assert path.clone_remove_node("Z") is None

    def test_remove_sets(self, triangle):
        edge = next(iter(triangle.adjacent_edges("B")))
        result = triangle.clone_remove({"A"}, {edge})
        assert result.nodes == {"B", "C"}
        assert result.size == (1 if "A" in edge.nodes else 0)

    def test_remove_nothing_present(self, path):
        assert path.clone_remove({"Z"}, {undirected("A", "B")}) is None

    def test_residual_keeps_untouched_edges(self, path):
        a_b = next(iter(path.adjacent_edges("A")))
        result = path.residual({"C"})
        assert result.edges == {a_b}

    def test_subgraph(self, triangle):
        result = triangle.subgraph({"A", "B"})
        assert result.nodes == {"A", "B"}
        assert result.size == 1
        assert triangle.is_sub_graph(result)

    def test_subgraph_unknown_node(self, triangle):
        with pytest.raises(InvalidArgumentError):
            triangle.subgraph({"Z"})
