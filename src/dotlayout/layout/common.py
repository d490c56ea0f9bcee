"""Helpers shared by the layout strategies.

Each strategy builds its own transient ``networkx`` graph from its inputs via
``build_digraph``; nothing here is cached between invocations.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, Sequence

import networkx as nx

from dotlayout.graph import Edge, Node
from dotlayout.layout.types import MIN_NODE_WIDTH, SPACING_PADDING


def min_spacing(nodes: Sequence[Node], base: float) -> float:
    """Spacing large enough that the widest node never overlaps its neighbour.

    Returns ``max(base, widest + SPACING_PADDING)``, where ``widest`` is at
    least ``MIN_NODE_WIDTH``.
    """
    if not nodes:
        return base
    widest = max(max(n.width or MIN_NODE_WIDTH for n in nodes), MIN_NODE_WIDTH)
    return max(base, widest + SPACING_PADDING)


def build_digraph(nodes: Sequence[Node], edges: Iterable[Edge]) -> nx.MultiDiGraph:
    """Build a MultiDiGraph over ``nodes``, preserving their order.

    Edges whose endpoints are not among ``nodes`` are dropped so strategies
    can be called on a node subset. Parallel edges are kept (they count
    toward degree); ``successors`` still yields each neighbour once, in
    first-edge order.
    """
    g: nx.MultiDiGraph = nx.MultiDiGraph()
    for node in nodes:
        g.add_node(node.id, data=node)
    for edge in edges:
        if edge.source in g and edge.target in g:
            g.add_edge(edge.source, edge.target, key=edge.id)
    return g


def resolve_anchor(nodes: Sequence[Node], anchor_id: str | None) -> Node | None:
    """Return the node designated by ``anchor_id``, or None if absent."""
    if anchor_id is None:
        return None
    for node in nodes:
        if node.id == anchor_id:
            return node
    return None


def assign_levels(graph: nx.MultiDiGraph, roots: Sequence[str]) -> dict[str, int]:
    """Longest-path leveling from ``roots`` along forward edges, cycle-safe.

    Breadth-first traversal from every root at once. A newly discovered node
    takes ``level(parent) + 1`` and is queued once. A node reached again
    through a longer path has its level raised in place but is not queued
    again. Edges inside a strongly connected component never raise a level,
    so a cycle keeps the levels of its first discovery. Roots stay at 0.

    Nodes unreachable from every root are absent from the result.
    """
    levels: dict[str, int] = {}
    pinned = set(roots)
    component: dict[str, int] = {}
    for index, members in enumerate(nx.strongly_connected_components(graph)):
        for member in members:
            component[member] = index

    queue: deque[str] = deque()
    for root in roots:
        if root not in levels:
            levels[root] = 0
            queue.append(root)

    while queue:
        current = queue.popleft()
        next_level = levels[current] + 1
        for succ in graph.successors(current):
            if succ not in levels:
                levels[succ] = next_level
                queue.append(succ)
            elif succ not in pinned and component[succ] != component[current]:
                levels[succ] = max(levels[succ], next_level)

    return levels


def place(nodes: Sequence[Node], positions: dict[str, tuple[float, float]]) -> list[Node]:
    """Return copies of ``nodes`` moved to ``positions``, in input order."""
    return [node.moved_to(*positions[node.id]) for node in nodes]
