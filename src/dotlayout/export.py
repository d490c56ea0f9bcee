"""Serialisable output for downstream renderers."""

from __future__ import annotations

from typing import Any

from dotlayout.geometry import EdgeGeometry, resolve_edge
from dotlayout.graph import Edge, Graph, Node, NodeStyle


def _style_dict(style: NodeStyle) -> dict[str, str]:
    out: dict[str, str] = {}
    if style.stroke is not None:
        out["stroke"] = style.stroke
    if style.background is not None:
        out["background"] = style.background
    if style.style is not None:
        out["style"] = style.style
    return out


def node_to_dict(node: Node) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node.id,
        "label": node.label,
        "width": node.width,
        "height": node.height,
        "position": {"x": node.position.x, "y": node.position.y},
    }
    style = _style_dict(node.style)
    if style:
        data["style"] = style
    if node.shape is not None:
        data["shape"] = node.shape
    if node.extra:
        data["extra"] = dict(node.extra)
    return data


def geometry_to_dict(geometry: EdgeGeometry) -> dict[str, Any]:
    return {
        "sourceAnchor": {
            "x": geometry.source_anchor.x,
            "y": geometry.source_anchor.y,
            "side": geometry.source_anchor.side.value,
        },
        "targetAnchor": {
            "x": geometry.target_anchor.x,
            "y": geometry.target_anchor.y,
            "side": geometry.target_anchor.side.value,
        },
        "path": geometry.path,
    }


def edge_to_dict(edge: Edge) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "renderKind": edge.render_kind.value,
    }
    attrs = edge.attributes
    if attrs.label is not None:
        data["label"] = attrs.label
    style = _style_dict(attrs.style)
    if style:
        data["style"] = style
    if attrs.shape is not None:
        data["shape"] = attrs.shape
    if attrs.extra:
        data["extra"] = dict(attrs.extra)
    return data


def graph_to_dict(graph: Graph, include_geometry: bool = False) -> dict[str, Any]:
    """Positioned graph as plain dicts/lists, ready for ``json.dumps``.

    With ``include_geometry``, each edge carries the geometry resolved
    against the graph's current node positions, or ``None`` when an endpoint
    is missing.
    """
    edges = []
    for edge in graph.edges:
        data = edge_to_dict(edge)
        if include_geometry:
            geometry = resolve_edge(edge, graph.nodes)
            data["geometry"] = geometry_to_dict(geometry) if geometry is not None else None
        edges.append(data)

    result: dict[str, Any] = {
        "directed": graph.directed,
        "nodes": [node_to_dict(n) for n in graph.nodes.values()],
        "edges": edges,
    }
    if graph.name:
        result["name"] = graph.name
    if graph.graph_attributes:
        result["graphAttributes"] = dict(graph.graph_attributes)
    return result
