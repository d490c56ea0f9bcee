"""Graph data model — nodes, edges and the ordered graph container.

The model is renderer-agnostic: a ``Graph`` is what the parser produces, what
layout strategies reposition, and what geometry resolution and exporters
read. Layout never mutates it; strategies return new ``Node`` values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Iterable

import networkx as nx

# ─── Defaults ─────────────────────────────────────────────────────────────────

DEFAULT_NODE_WIDTH: float = 150.0
DEFAULT_NODE_HEIGHT: float = 40.0
FILLED_BACKGROUND = "#fff"


# ─── Value Types ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Position:
    """Top-left corner of a node box in canvas units."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class Rect:
    """An axis-aligned node rectangle (top-left corner plus size)."""

    x: float
    y: float
    width: float = DEFAULT_NODE_WIDTH
    height: float = DEFAULT_NODE_HEIGHT

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class NodeStyle:
    """Recognised visual attributes.

    ``stroke`` comes from ``color``, ``background`` from ``fillcolor`` and
    ``style`` keeps the raw ``style=`` value for pass-through.
    """

    stroke: str | None = None
    background: str | None = None
    style: str | None = None

    def merged(self, other: NodeStyle) -> NodeStyle:
        """Return a style where every field set on ``other`` wins."""
        return NodeStyle(
            stroke=other.stroke if other.stroke is not None else self.stroke,
            background=other.background if other.background is not None else self.background,
            style=other.style if other.style is not None else self.style,
        )

    def is_empty(self) -> bool:
        return self.stroke is None and self.background is None and self.style is None


class RenderKind(str, Enum):
    """How a renderer should draw an edge."""

    FLOATING = "floating"  # curved, anchors follow the node rectangles
    ORTHOGONAL = "orthogonal"  # elbow path, bottom-of-source to top-of-target


# ─── Nodes and Edges ──────────────────────────────────────────────────────────


@dataclass
class Node:
    """A graph node.

    ``id`` is the stable identity; everything a layout strategy changes lives
    in ``position``. Unrecognised attributes are kept verbatim in ``extra``.
    """

    id: str
    label: str = ""
    width: float = DEFAULT_NODE_WIDTH
    height: float = DEFAULT_NODE_HEIGHT
    position: Position = field(default_factory=Position)
    style: NodeStyle = field(default_factory=NodeStyle)
    shape: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.label:
            self.label = self.id

    @property
    def rect(self) -> Rect:
        return Rect(self.position.x, self.position.y, self.width, self.height)

    @property
    def center(self) -> tuple[float, float]:
        return self.rect.center

    def moved_to(self, x: float, y: float) -> Node:
        """Return a copy of this node placed at (x, y) with its own ``extra`` map."""
        return replace(self, position=Position(float(x), float(y)), extra=dict(self.extra))


@dataclass
class EdgeAttributes:
    """Recognised edge attributes plus the opaque extension map."""

    label: str | None = None
    style: NodeStyle = field(default_factory=NodeStyle)
    shape: str | None = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass
class Edge:
    """A directed (or, in an undirected graph, unordered) connection."""

    id: str
    source: str
    target: str
    attributes: EdgeAttributes = field(default_factory=EdgeAttributes)
    render_kind: RenderKind = RenderKind.FLOATING

    @property
    def label(self) -> str | None:
        return self.attributes.label


# ─── Graph ────────────────────────────────────────────────────────────────────


@dataclass
class Graph:
    """Ordered node mapping plus ordered edge list.

    Node insertion order is the order of first reference in the source text
    (definition or edge mention) and drives layout tie-breaks. Every edge
    endpoint is guaranteed to exist in ``nodes``.
    """

    directed: bool = True
    name: str | None = None
    nodes: dict[str, Node] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)
    graph_attributes: dict[str, str] = field(default_factory=dict)

    def add_node(self, node: Node) -> Node:
        self.nodes[node.id] = node
        return node

    def ensure_node(self, node_id: str) -> Node:
        """Return the node with ``node_id``, creating a default one if missing."""
        node = self.nodes.get(node_id)
        if node is None:
            node = self.add_node(Node(id=node_id))
        return node

    def add_edge(self, edge: Edge) -> Edge:
        self.ensure_node(edge.source)
        self.ensure_node(edge.target)
        self.edges.append(edge)
        return edge

    def node_list(self) -> list[Node]:
        return list(self.nodes.values())

    def with_nodes(self, nodes: Iterable[Node]) -> Graph:
        """Return a new Graph holding ``nodes`` in place of the current ones.

        Used by layout: the edge list and graph attributes are shared, and
        node order follows the current graph for every id that is kept.
        """
        by_id = {n.id: n for n in nodes}
        ordered: dict[str, Node] = {}
        for node_id in self.nodes:
            if node_id in by_id:
                ordered[node_id] = by_id.pop(node_id)
        ordered.update(by_id)
        return Graph(
            directed=self.directed,
            name=self.name,
            nodes=ordered,
            edges=self.edges,
            graph_attributes=self.graph_attributes,
        )

    def to_networkx(self) -> nx.MultiDiGraph:
        """Build a ``networkx`` view keyed by node id and edge id.

        Node objects live under the ``data`` attribute of each node and edge
        objects under ``data`` of each edge, mirroring how the layout
        pipeline stores payloads on its graphs.
        """
        g: nx.MultiDiGraph = nx.MultiDiGraph(directed=self.directed, name=self.name or "")
        for node_id, node in self.nodes.items():
            g.add_node(node_id, data=node)
        for edge in self.edges:
            g.add_edge(edge.source, edge.target, key=edge.id, data=edge)
        return g
