"""Interface to an external layout engine (ELK-style).

The built-in strategies and an external engine speak the same request and
response shapes, so either can replace the other or run before/after it:

    request  = nodes {id, width, height} + edges {id, source, target} + options
    response = nodes {id, x, y, width?, height?} + edges {id, source, target}

``apply_external_layout`` merges a response back into a ``Graph`` by id. Any
engine failure becomes a ``LayoutError``; the input graph is never modified,
so callers keep it as the fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Protocol

from dotlayout.errors import LayoutError
from dotlayout.graph import Edge, Graph, Node, Position
from dotlayout.layout import apply_layout
from dotlayout.layout.types import LayoutParams

logger = logging.getLogger(__name__)

# ─── Options ──────────────────────────────────────────────────────────────────

ALGORITHM_LAYERED = "layered"
ALGORITHM_FORCE = "force"
ALGORITHM_STRESS = "stress"
ALGORITHM_MRTREE = "mrtree"

DIRECTION_DOWN = "DOWN"
DIRECTION_RIGHT = "RIGHT"

DEFAULT_OPTIONS: dict[str, str] = {
    "elk.algorithm": ALGORITHM_LAYERED,
    "elk.direction": DIRECTION_DOWN,
    "elk.layered.spacing.nodeNodeBetweenLayers": "100",
    "elk.spacing.nodeNode": "80",
    "elk.padding": "[top=50,left=50,bottom=50,right=50]",
}

LAYOUT_PRESETS: dict[str, dict[str, str]] = {
    "hierarchical": {
        "elk.algorithm": ALGORITHM_LAYERED,
        "elk.direction": DIRECTION_DOWN,
        "elk.layered.spacing.nodeNodeBetweenLayers": "100",
        "elk.spacing.nodeNode": "80",
    },
    "hierarchicalHorizontal": {
        "elk.algorithm": ALGORITHM_LAYERED,
        "elk.direction": DIRECTION_RIGHT,
        "elk.layered.spacing.nodeNodeBetweenLayers": "100",
        "elk.spacing.nodeNode": "80",
    },
    "force": {"elk.algorithm": ALGORITHM_FORCE, "elk.spacing.nodeNode": "100"},
    "stress": {"elk.algorithm": ALGORITHM_STRESS, "elk.spacing.nodeNode": "100"},
    "tree": {"elk.algorithm": ALGORITHM_MRTREE, "elk.spacing.nodeNode": "80"},
}


def preset_options(name: str | None) -> dict[str, str]:
    """Options for a named preset; unknown names use ``hierarchical``."""
    return dict(LAYOUT_PRESETS.get(name or "", LAYOUT_PRESETS["hierarchical"]))


# ─── Request / Response ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class RequestNode:
    id: str
    width: float
    height: float


@dataclass(frozen=True)
class LayoutEdge:
    id: str
    source: str
    target: str


@dataclass(frozen=True)
class ResponseNode:
    id: str
    x: float
    y: float
    width: float | None = None
    height: float | None = None


@dataclass
class LayoutRequest:
    nodes: list[RequestNode]
    edges: list[LayoutEdge]
    options: dict[str, str] = field(default_factory=dict)


@dataclass
class LayoutResponse:
    nodes: list[ResponseNode]
    edges: list[LayoutEdge] = field(default_factory=list)


class ExternalLayoutEngine(Protocol):
    """Anything that can position a ``LayoutRequest``."""

    def layout(self, request: LayoutRequest) -> LayoutResponse:
        """Return positions for every node in ``request``."""
        ...


def build_request(graph: Graph, options: Mapping[str, str] | None = None) -> LayoutRequest:
    """Describe ``graph`` for an engine; ``options`` override ``DEFAULT_OPTIONS``."""
    merged = dict(DEFAULT_OPTIONS)
    merged.update({str(k): str(v) for k, v in (options or {}).items()})
    return LayoutRequest(
        nodes=[RequestNode(n.id, n.width, n.height) for n in graph.nodes.values()],
        edges=[LayoutEdge(e.id, e.source, e.target) for e in graph.edges],
        options=merged,
    )


# ─── ELK JSON ─────────────────────────────────────────────────────────────────


def to_elk_json(request: LayoutRequest, root_id: str = "root") -> dict[str, Any]:
    """The ELK JSON graph for ``request`` (``children`` + ``sources``/``targets``)."""
    return {
        "id": root_id,
        "layoutOptions": dict(request.options),
        "children": [{"id": n.id, "width": n.width, "height": n.height} for n in request.nodes],
        "edges": [{"id": e.id, "sources": [e.source], "targets": [e.target]} for e in request.edges],
    }


def from_elk_json(payload: Mapping[str, Any]) -> LayoutResponse:
    """Read a laid-out ELK JSON graph back into a ``LayoutResponse``.

    Raises:
        LayoutError: if the payload is not a laid-out ELK graph.
    """
    try:
        nodes = [
            ResponseNode(
                id=str(child["id"]),
                x=float(child["x"]),
                y=float(child["y"]),
                width=float(child["width"]) if child.get("width") is not None else None,
                height=float(child["height"]) if child.get("height") is not None else None,
            )
            for child in payload.get("children", [])
        ]
        edges = [
            LayoutEdge(str(edge["id"]), str(edge["sources"][0]), str(edge["targets"][0]))
            for edge in payload.get("edges", [])
        ]
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise LayoutError(f"Malformed ELK layout response: {exc}") from exc
    return LayoutResponse(nodes=nodes, edges=edges)


# ─── Merging ──────────────────────────────────────────────────────────────────


def merge_response(graph: Graph, response: LayoutResponse) -> Graph:
    """Return a new graph with positions (and sizes, when given) from ``response``.

    Node and edge attributes are kept; edge endpoints follow the response
    where it reports them. Every graph node must be present in the response.
    """
    placed = {n.id: n for n in response.nodes}
    missing = [node_id for node_id in graph.nodes if node_id not in placed]
    if missing:
        raise LayoutError(f"Layout response is missing {len(missing)} node(s): {', '.join(missing[:5])}")

    nodes: list[Node] = []
    for node in graph.nodes.values():
        result = placed[node.id]
        nodes.append(
            replace(
                node,
                position=Position(result.x, result.y),
                width=result.width or node.width,
                height=result.height or node.height,
                extra=dict(node.extra),
            )
        )

    laid_out = graph.with_nodes(nodes)
    routed = {e.id: e for e in response.edges}
    if routed:
        edges: list[Edge] = []
        for edge in graph.edges:
            result_edge = routed.get(edge.id)
            if result_edge is not None and result_edge.source in laid_out.nodes and result_edge.target in laid_out.nodes:
                edge = replace(edge, source=result_edge.source, target=result_edge.target)
            edges.append(edge)
        laid_out.edges = edges
    return laid_out


def apply_external_layout(
    graph: Graph,
    engine: ExternalLayoutEngine,
    options: Mapping[str, str] | None = None,
) -> Graph:
    """Lay ``graph`` out with ``engine``.

    Raises:
        LayoutError: the engine raised, or its response is unusable. The
            original exception is chained as ``__cause__``.
    """
    request = build_request(graph, options)
    try:
        response = engine.layout(request)
    except LayoutError:
        raise
    except Exception as exc:
        logger.exception("External layout engine failed")
        raise LayoutError(f"External layout failed: {exc}") from exc
    return merge_response(graph, response)


# ─── Built-in Adapter ─────────────────────────────────────────────────────────


class BuiltinLayoutEngine:
    """Expose a built-in strategy through the ``ExternalLayoutEngine`` protocol.

    Only node sizes and edge endpoints from the request are used; request
    options are ignored in favour of ``params``.
    """

    def __init__(self, name: str = "hierarchical", params: LayoutParams | None = None) -> None:
        self.name = name
        self.params = params

    def layout(self, request: LayoutRequest) -> LayoutResponse:
        nodes = [Node(id=n.id, width=n.width, height=n.height) for n in request.nodes]
        edges = [Edge(id=e.id, source=e.source, target=e.target) for e in request.edges]
        placed = apply_layout(self.name, nodes, edges, self.params)
        return LayoutResponse(
            nodes=[ResponseNode(n.id, n.position.x, n.position.y, n.width, n.height) for n in placed],
            edges=list(request.edges),
        )
