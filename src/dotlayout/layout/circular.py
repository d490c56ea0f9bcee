"""Circular layout — nodes evenly spaced on a circle around an optional anchor."""

from __future__ import annotations

import math
from typing import Sequence

from dotlayout.graph import Edge, Node
from dotlayout.layout.common import min_spacing, place, resolve_anchor
from dotlayout.layout.types import DEFAULT_PARAMS, LayoutParams


def circular_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    params: LayoutParams = DEFAULT_PARAMS,
) -> list[Node]:
    """Place the anchor node at the centre and the rest on a circle.

    The radius grows with the number of ringed nodes so that neighbours are
    at least the minimum spacing apart along the circumference:
    ``max(min_radius, spacing * count / 2π)``. The first ringed node sits at
    angle 0 and the rest follow in input order.
    """
    if not nodes:
        return []

    cx, cy = params.center
    anchor = resolve_anchor(nodes, params.anchor_id)
    ringed = [n for n in nodes if anchor is None or n.id != anchor.id]
    count = len(ringed)

    spacing = min_spacing(nodes, params.spacing.node_spacing)
    radius = max(params.spacing.min_radius, spacing * count / (2 * math.pi))

    positions: dict[str, tuple[float, float]] = {}
    if anchor is not None:
        positions[anchor.id] = (cx, cy)
    for index, node in enumerate(ringed):
        angle = 2 * math.pi * index / count
        positions[node.id] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))

    return place(nodes, positions)
