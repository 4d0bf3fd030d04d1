"""
Optional capability for nodes and edges that want to hear about membership.

A node or edge implementing `GraphMember` is asked before it joins or leaves
a `MutableGraph` whose `context_enabled` flag is set, and may refuse the change
by returning False. Elements without these methods are added and removed
unconditionally.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class GraphMember(Protocol):
    """Protocol for graph elements that can veto membership changes."""

    def joining_graph(self, graph: Any) -> bool:
        """Called before the element is added. Return False to refuse."""
        ...

    def leaving_graph(self, graph: Any) -> bool:
        """Called before the element is removed. Return False to refuse."""
        ...


def accepts_join(element: object, graph: Any) -> bool:
    """True unless `element` is a GraphMember refusing to join `graph`."""
    if isinstance(element, GraphMember):
        return element.joining_graph(graph)
    return True


def accepts_leave(element: object, graph: Any) -> bool:
    """True unless `element` is a GraphMember refusing to leave `graph`."""
    if isinstance(element, GraphMember):
        return element.leaving_graph(graph)
    return True
