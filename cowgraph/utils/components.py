"""
Reachability and connected components over an implicit graph.

The graph is given as a node collection plus a neighbour function, so the
same code serves adjacency lists, traversable-only adjacency and node subsets.
"""

from collections import deque
from collections.abc import Iterable, Set
from typing import Callable, TypeVar

T = TypeVar("T")


def reachable(start: T, node_to_neighbours: Callable[[T], Iterable[T]]) -> set[T]:
    """
    Nodes reachable from `start` by following `node_to_neighbours`.

    `start` itself is included.
    """
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbour in node_to_neighbours(current):
            if neighbour not in seen:
                seen.add(neighbour)
                queue.append(neighbour)
    return seen


def is_reachable(
    start: T, target: T, node_to_neighbours: Callable[[T], Iterable[T]]
) -> bool:
    """True if `target` can be reached from `start`. Stops as soon as it is."""
    if start == target:
        return True
    seen = {start}
    queue = deque([start])
    while queue:
        current = queue.popleft()
        for neighbour in node_to_neighbours(current):
            if neighbour == target:
                return True
            if neighbour not in seen:
                seen.add(neighbour)
                queue.append(neighbour)
    return False


def connected_components(
    nodes: Set[T], node_to_neighbours: Callable[[T], Iterable[T]]
) -> frozenset[frozenset[T]]:
    """
    Partition `nodes` into connected components.

    The neighbour function must be symmetric for the result to be meaningful.
    Neighbours outside `nodes` are ignored.

    Returns:
        frozenset of components, each a frozenset of nodes.
    """
    seen: set[T] = set()
    components = set()

    for node in nodes:
        if node in seen:
            continue

        component = reachable(
            node,
            lambda current: (n for n in node_to_neighbours(current) if n in nodes),
        )
        seen.update(component)
        components.add(frozenset(component))
    return frozenset(components)
