"""Hierarchical (tree) layout — levels top to bottom, children under parents.

Phases:
  1. Root detection (in-degree 0; first node if the graph is fully cyclic)
  2. Longest-path leveling (cycle-safe, see ``assign_levels``)
  3. Root spreading around the centre column
  4. Depth-first child placement, centred under each parent, with a bounded
     rightward de-overlap search per child
  5. Column fallback for nodes no root reaches
  6. Optional re-orientation (BT / LR / RL)
"""

from __future__ import annotations

from typing import Iterator, Sequence

import networkx as nx

from dotlayout.graph import Edge, Node
from dotlayout.layout.common import assign_levels, build_digraph, min_spacing, place
from dotlayout.layout.types import DEFAULT_PARAMS, SPACING_PADDING, LayoutParams

# Maximum number of half-spacing shifts tried when a child overlaps a sibling.
MAX_SHIFT_ATTEMPTS: int = 10


def find_roots(graph: nx.MultiDiGraph) -> list[str]:
    """Nodes without incoming edges, in node order; the first node if none."""
    roots = [node_id for node_id in graph.nodes if graph.in_degree(node_id) == 0]
    if not roots and graph.number_of_nodes() > 0:
        roots = [next(iter(graph.nodes))]
    return roots


def hierarchical_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    params: LayoutParams = DEFAULT_PARAMS,
) -> list[Node]:
    """Arrange nodes in levels, each child centred under its first-placing parent.

    Placement is best-effort: a child that would sit closer than
    ``spacing - SPACING_PADDING`` to an already-placed node of the same level
    is shifted right by half the spacing, at most ``MAX_SHIFT_ATTEMPTS``
    times, and then accepted even if the overlap persists.
    """
    if not nodes:
        return []

    graph = build_digraph(nodes, edges)
    roots = find_roots(graph)
    levels = assign_levels(graph, roots)

    spacing = min_spacing(nodes, params.spacing.node_spacing)
    level_spacing = params.spacing.level_spacing
    center_x = params.center[0]
    start_y = params.origin[1]
    min_gap = spacing - SPACING_PADDING

    positions: dict[str, tuple[float, float]] = {}

    def y_for(node_id: str) -> float:
        return start_y + levels.get(node_id, 0) * level_spacing

    def overlaps(x: float, node_id: str) -> bool:
        level = levels.get(node_id, 0)
        for other_id, (other_x, _) in positions.items():
            if other_id == node_id or levels.get(other_id, 0) != level:
                continue
            if abs(x - other_x) < min_gap:
                return True
        return False

    def child_slots(parent_id: str) -> Iterator[tuple[float, str]]:
        children = list(graph.successors(parent_id))
        parent_x = positions[parent_id][0]
        first_x = parent_x - (len(children) - 1) * spacing / 2
        for index, child_id in enumerate(children):
            yield first_x + index * spacing, child_id

    # Roots: one centred, several spread evenly around the centre.
    first_root_x = center_x - (len(roots) - 1) * spacing / 2
    for index, root_id in enumerate(roots):
        positions[root_id] = (first_root_x + index * spacing, start_y)

    # Depth-first: a child's subtree is placed before its next sibling.
    for root_id in roots:
        stack: list[Iterator[tuple[float, str]]] = [child_slots(root_id)]
        while stack:
            slot = next(stack[-1], None)
            if slot is None:
                stack.pop()
                continue
            child_x, child_id = slot
            if child_id in positions:
                continue
            attempts = 0
            while attempts < MAX_SHIFT_ATTEMPTS and overlaps(child_x, child_id):
                child_x += spacing / 2
                attempts += 1
            positions[child_id] = (child_x, y_for(child_id))
            stack.append(child_slots(child_id))

    # Unreached nodes: a single column keyed by level.
    for node in nodes:
        if node.id not in positions:
            positions[node.id] = (center_x, y_for(node.id))

    return place(nodes, orient(positions, params.direction))


def orient(positions: dict[str, tuple[float, float]], direction: str) -> dict[str, tuple[float, float]]:
    """Re-orient a top-to-bottom layout.

    ``LR`` swaps the axes so levels run left to right. ``BT`` and ``RL``
    additionally mirror the level axis within the occupied range.
    """
    direction = (direction or "TB").upper()
    if direction in ("TB", "TD") or not positions:
        return positions

    if direction in ("LR", "RL"):
        positions = {node_id: (y, x) for node_id, (x, y) in positions.items()}

    if direction == "BT":
        ys = [y for _, y in positions.values()]
        low, high = min(ys), max(ys)
        return {node_id: (x, low + high - y) for node_id, (x, y) in positions.items()}
    if direction == "RL":
        xs = [x for x, _ in positions.values()]
        low, high = min(xs), max(xs)
        return {node_id: (low + high - x, y) for node_id, (x, y) in positions.items()}
    return positions
