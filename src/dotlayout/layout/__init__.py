"""Layout strategy registry and public API.

Every strategy is a pure function ``(nodes, edges, params) -> nodes`` that
returns a repositioned copy of each input node, in input order.
"""

from __future__ import annotations

import logging
from typing import Sequence

from dotlayout.graph import Edge, Graph, Node
from dotlayout.layout.circular import circular_layout
from dotlayout.layout.common import assign_levels, build_digraph, min_spacing, resolve_anchor
from dotlayout.layout.force import force_directed_layout
from dotlayout.layout.grid import grid_layout
from dotlayout.layout.hierarchical import find_roots, hierarchical_layout, orient
from dotlayout.layout.radial import circular_mean, pick_center, radial_layout, ring_radius
from dotlayout.layout.types import (
    BOUNDS,
    CENTER,
    DEFAULT_PARAMS,
    DEFAULT_SPACING,
    ORIGIN,
    SPACING_PADDING,
    LayoutParams,
    LayoutSpacing,
    LayoutStrategy,
)

logger = logging.getLogger(__name__)

DEFAULT_LAYOUT = "circular"

# Canonical names plus the Graphviz engine names people already know.
LAYOUTS: dict[str, LayoutStrategy] = {
    "circular": circular_layout,
    "circo": circular_layout,
    "grid": grid_layout,
    "hierarchical": hierarchical_layout,
    "dot": hierarchical_layout,
    "tree": hierarchical_layout,
    "force": force_directed_layout,
    "fdp": force_directed_layout,
    "neato": force_directed_layout,
    "radial": radial_layout,
    "twopi": radial_layout,
}

__all__ = [
    "BOUNDS",
    "CENTER",
    "DEFAULT_LAYOUT",
    "DEFAULT_PARAMS",
    "DEFAULT_SPACING",
    "LAYOUTS",
    "ORIGIN",
    "SPACING_PADDING",
    "LayoutParams",
    "LayoutSpacing",
    "LayoutStrategy",
    "apply_layout",
    "assign_levels",
    "build_digraph",
    "circular_layout",
    "circular_mean",
    "find_roots",
    "force_directed_layout",
    "get_layout",
    "grid_layout",
    "hierarchical_layout",
    "layout_graph",
    "min_spacing",
    "orient",
    "pick_center",
    "radial_layout",
    "resolve_anchor",
    "ring_radius",
]


def get_layout(name: str | None) -> LayoutStrategy:
    """Look up a strategy by (case-insensitive) name; unknown names fall back to circular."""
    key = (name or DEFAULT_LAYOUT).strip().lower()
    strategy = LAYOUTS.get(key)
    if strategy is None:
        logger.warning("Unknown layout %r, falling back to %s", name, DEFAULT_LAYOUT)
        strategy = LAYOUTS[DEFAULT_LAYOUT]
    return strategy


def apply_layout(
    name: str | None,
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    params: LayoutParams | None = None,
) -> list[Node]:
    """Run the strategy registered under ``name`` and return the moved nodes."""
    strategy = get_layout(name)
    result = strategy(nodes, edges, params or DEFAULT_PARAMS)
    logger.debug("Layout %s placed %d node(s)", name or DEFAULT_LAYOUT, len(result))
    return result


def layout_graph(graph: Graph, name: str | None = None, params: LayoutParams | None = None) -> Graph:
    """Return a new ``Graph`` with positions from the named strategy.

    With no ``name``, a ``layout=`` graph attribute from the source text is
    honoured before falling back to the default.
    """
    name = name or graph.graph_attributes.get("layout")
    nodes = apply_layout(name, graph.node_list(), graph.edges, params)
    return graph.with_nodes(nodes)
