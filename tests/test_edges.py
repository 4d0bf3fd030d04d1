"""Tests for cowgraph/edges.py"""

import pytest

from cowgraph import DirectedEdge, InvalidArgumentError, UndirectedEdge
from cowgraph.edges import directed, undirected


class TestConstruction:
    def test_none_endpoint(self):
        with pytest.raises(InvalidArgumentError, match="None"):
            undirected("A", None)

    def test_single_endpoint(self):
        with pytest.raises(InvalidArgumentError, match="at least 2"):
            undirected("A")

    def test_nodes_are_a_tuple(self):
        edge = UndirectedEdge(["A", "B"])
        assert edge.nodes == ("A", "B")

    def test_identity_semantics(self):
        """Edges over the same endpoints stay distinct (multi-edges)."""
        first = undirected("A", "B")
        second = undirected("A", "B")
        assert first != second
        assert len({first, second}) == 2
        assert first == first

    def test_rank(self):
        assert undirected("A", "B").rank == 2
        assert undirected("A", "B", "C").rank == 3

    def test_str(self):
        assert str(undirected("A", "B")) == "A -- B"
        assert str(directed("A", "B")) == "A -> B"
        assert str(directed("A", "B", "C")) == "A -> {B, C}"


class TestTraversability:
    def test_undirected_from_every_endpoint(self):
        edge = undirected("A", "B", "C")
        assert edge.traversable_nodes("A") == ("B", "C")
        assert edge.traversable_nodes("C") == ("A", "B")
        assert edge.is_traversable("B")

    def test_not_an_endpoint(self):
        assert undirected("A", "B").traversable_nodes("Z") == ()
        assert not undirected("A", "B").is_traversable("Z")

    def test_self_loop(self):
        assert undirected("A", "A").traversable_nodes("A") == ("A",)

    def test_directed_only_from_source(self):
        edge = directed("A", "B")
        assert edge.traversable_nodes("A") == ("B",)
        assert edge.traversable_nodes("B") == ()
        assert edge.is_traversable("A")
        assert not edge.is_traversable("B")

    def test_directed_hyperedge(self):
        edge = directed("A", "B", "C")
        assert edge.source == "A"
        assert edge.destinations == ("B", "C")
        assert edge.traversable_nodes("A") == ("B", "C")

    def test_destination_of_hyperedge_is_ambiguous(self):
        assert directed("A", "B").destination == "B"
        with pytest.raises(InvalidArgumentError):
            directed("A", "B", "C").destination


class TestDerivation:
    def test_with_added(self):
        edge = undirected("A", "B")
        grown = edge.with_added("C")
        assert grown.nodes == ("A", "B", "C")
        assert isinstance(grown, UndirectedEdge)
        assert edge.nodes == ("A", "B")

    def test_with_added_directed_adds_destination(self):
        grown = directed("A", "B").with_added("C")
        assert isinstance(grown, DirectedEdge)
        assert grown.traversable_nodes("A") == ("B", "C")

    def test_with_added_none(self):
        with pytest.raises(InvalidArgumentError):
            undirected("A", "B").with_added(None)

    def test_with_removed_hyperedge(self):
        edge = undirected("A", "B", "C")
        shrunk = edge.with_removed("B")
        assert shrunk is not edge
        assert shrunk.nodes == ("A", "C")
        assert edge.nodes == ("A", "B", "C")

    def test_with_removed_below_two_endpoints(self):
        assert undirected("A", "B").with_removed("A") is None
        assert undirected("A", "A").with_removed("A") is None

    def test_with_removed_non_endpoint(self):
        with pytest.raises(InvalidArgumentError, match="not an endpoint"):
            undirected("A", "B").with_removed("C")

    def test_removing_directed_source(self):
        assert directed("A", "B", "C").with_removed("A") is None

    def test_removing_directed_destination(self):
        shrunk = directed("A", "B", "C").with_removed("B")
        assert isinstance(shrunk, DirectedEdge)
        assert shrunk.nodes == ("A", "C")

    def test_without_removes_every_occurrence(self):
        edge = undirected("A", "B", "A", "C")
        assert edge.without({"A"}).nodes == ("B", "C")
        assert edge.without({"A", "B"}) is None

    def test_without_untouched_keeps_identity(self):
        edge = undirected("A", "B")
        assert edge.without({"Z"}) is edge
