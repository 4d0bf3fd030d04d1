"""
Union-Find (Disjoint Set Union) data structure.

- find(x): representative of the set containing x, O(α(n)) amortized
- union(x, y): merge the sets of x and y, O(α(n)) amortized
- len(uf): number of disjoint sets currently tracked

Used for whole-graph weak connectivity: one pass over the edges merges every
edge's endpoints, then the graph is connected iff a single set remains.
"""

from collections.abc import Iterable
from typing import Generic, TypeVar

Element = TypeVar("Element")


class UnionFind(Generic[Element]):
    """
    Union-Find with path compression and union by rank.

    Example:
        >>> uf = UnionFind(["a", "b", "c"])
        >>> uf.union("a", "b")
        'a'
        >>> len(uf)
        2
    """

    def __init__(self, elements: Iterable[Element] = ()) -> None:
        self._parent: dict[Element, Element] = {}
        self._rank: dict[Element, int] = {}
        self._set_count = 0
        for element in elements:
            self.add(element)

    def add(self, element: Element) -> None:
        """Track `element` as a singleton set. No-op if already tracked."""
        if element in self._parent:
            return
        self._parent[element] = element
        self._rank[element] = 0
        self._set_count += 1

    def find(self, element: Element) -> Element:
        self.add(element)

        root = element
        while self._parent[root] != root:
            root = self._parent[root]

        # Path compression
        current = element
        while self._parent[current] != root:
            self._parent[current], current = root, self._parent[current]

        return root

    def union(self, x: Element, y: Element) -> Element:
        """Merges the sets of x and y and returns the new representative."""
        root_x = self.find(x)
        root_y = self.find(y)
        if root_x == root_y:
            return root_x

        self._set_count -= 1
        if self._rank[root_x] < self._rank[root_y]:
            root_x, root_y = root_y, root_x
        self._parent[root_y] = root_x
        if self._rank[root_x] == self._rank[root_y]:
            self._rank[root_x] += 1
        return root_x

    def connected(self, x: Element, y: Element) -> bool:
        return self.find(x) == self.find(y)

    def __len__(self) -> int:
        return self._set_count
