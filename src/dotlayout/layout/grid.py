"""Grid layout — row-major placement in uniform cells."""

from __future__ import annotations

import math
from typing import Sequence

from dotlayout.graph import Edge, Node
from dotlayout.layout.common import min_spacing, place
from dotlayout.layout.types import DEFAULT_PARAMS, LayoutParams


def grid_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    params: LayoutParams = DEFAULT_PARAMS,
) -> list[Node]:
    """Fill rows left to right, ``ceil(sqrt(n))`` columns unless overridden."""
    if not nodes:
        return []

    columns = params.columns if params.columns and params.columns > 0 else math.ceil(math.sqrt(len(nodes)))
    cell = min_spacing(nodes, params.spacing.grid_spacing)
    start_x, start_y = params.origin

    positions: dict[str, tuple[float, float]] = {}
    for index, node in enumerate(nodes):
        row, col = divmod(index, columns)
        positions[node.id] = (start_x + col * cell, start_y + row * cell)

    return place(nodes, positions)
