"""Graph algorithms for module graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Mapping


class _TarjanState:
    """Mutable state container for Tarjan's SCC algorithm."""

    def __init__(self) -> None:
        self.index = 0
        self.indices: dict[Hashable, int] = {}
        self.low_link: dict[Hashable, int] = {}
        self.on_stack: set[Hashable] = set()
        self.stack: list[Hashable] = []
        self.sccs: list[list[Hashable]] = []

    def visit(self, node: Hashable) -> None:
        self.indices[node] = self.index
        self.low_link[node] = self.index
        self.index += 1
        self.stack.append(node)
        self.on_stack.add(node)

    def pop_scc(self, root: Hashable) -> list[Hashable]:
        scc: list[Hashable] = []
        while True:
            w = self.stack.pop()
            self.on_stack.remove(w)
            scc.append(w)
            if w == root:
                return scc


def _neighbors(graph: Mapping[Hashable, Iterable[Hashable]], node: Hashable) -> list:
    return sorted(graph.get(node, ()))


def _strongconnect(
    start: Hashable,
    graph: Mapping[Hashable, Iterable[Hashable]],
    state: _TarjanState,
) -> None:
    """Run Tarjan's algorithm from ``start`` with an explicit call stack.

    Module graphs can be deeper than the interpreter recursion limit, so each
    frame is a ``(node, remaining neighbors)`` pair instead of a Python call.
    """
    state.visit(start)
    frames = [(start, iter(_neighbors(graph, start)))]

    while frames:
        node, neighbors = frames[-1]
        advanced = False
        for neighbor in neighbors:
            if neighbor not in state.indices:
                state.visit(neighbor)
                frames.append((neighbor, iter(_neighbors(graph, neighbor))))
                advanced = True
                break
            if neighbor in state.on_stack:
                state.low_link[node] = min(
                    state.low_link[node], state.indices[neighbor]
                )
        if advanced:
            continue

        frames.pop()
        if frames:
            parent = frames[-1][0]
            state.low_link[parent] = min(state.low_link[parent], state.low_link[node])

        if state.low_link[node] == state.indices[node]:
            scc = state.pop_scc(node)
            if len(scc) > 1 or node in graph.get(node, ()):
                state.sccs.append(scc)


def find_cycles(
    graph: Mapping[Hashable, Iterable[Hashable]],
) -> list[list[Hashable]]:
    """Find cycles in a directed graph using Tarjan's algorithm.

    Args:
        graph: Mapping of node to the nodes it points at

    Returns:
        List of cycles (strongly connected components with more than one
        node, or a single node pointing at itself)
    """
    state = _TarjanState()

    for node in graph:
        if node not in state.indices:
            _strongconnect(node, graph, state)

    return state.sccs


__all__ = ["find_cycles"]
