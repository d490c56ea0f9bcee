"""dotlayout — parse DOT-style graph text and compute node positions.

    >>> from dotlayout import parse, layout_graph, resolve_edge
    >>> graph = layout_graph(parse("digraph { a -> b; }"), "hierarchical")
    >>> geometry = resolve_edge(graph.edges[0], graph.nodes)
"""

from dotlayout.errors import DotLayoutError, LayoutError, ParseError
from dotlayout.export import graph_to_dict
from dotlayout.geometry import EdgeGeometry, Side, resolve_edge, resolve_floating, resolve_orthogonal
from dotlayout.graph import Edge, EdgeAttributes, Graph, Node, NodeStyle, Position, Rect, RenderKind
from dotlayout.layout import LAYOUTS, LayoutParams, LayoutSpacing, apply_layout, get_layout, layout_graph
from dotlayout.parser import parse

__version__ = "0.1.0"

__all__ = [
    "LAYOUTS",
    "DotLayoutError",
    "Edge",
    "EdgeAttributes",
    "EdgeGeometry",
    "Graph",
    "LayoutError",
    "LayoutParams",
    "LayoutSpacing",
    "Node",
    "NodeStyle",
    "ParseError",
    "Position",
    "Rect",
    "RenderKind",
    "Side",
    "apply_layout",
    "get_layout",
    "graph_to_dict",
    "layout_graph",
    "parse",
    "resolve_edge",
    "resolve_floating",
    "resolve_orthogonal",
]
