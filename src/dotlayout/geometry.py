"""Edge geometry — anchor points and render paths from live node rectangles.

Geometry is derived, never stored: callers resolve it per edge on every
render so it always follows the current node positions.

Floating edges pick a side per endpoint by comparing the horizontal and
vertical distance between the two rectangle centres, anchor at that side's
midpoint, and connect with a cubic Bézier. Orthogonal edges run from the
bottom of the source to the top of the target with an elbow at mid-height.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping

from dotlayout.graph import Edge, Node, Rect, RenderKind

logger = logging.getLogger(__name__)

# Control-point offset as a fraction of the anchor-to-anchor span.
CURVATURE: float = 0.3


class Side(str, Enum):
    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def is_horizontal(self) -> bool:
        return self in (Side.LEFT, Side.RIGHT)


@dataclass(frozen=True)
class Point:
    """A 2D point in canvas units."""

    x: float
    y: float


@dataclass(frozen=True)
class Anchor:
    """Where an edge attaches to a node rectangle."""

    x: float
    y: float
    side: Side

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True)
class EdgeGeometry:
    """Resolved geometry for one edge.

    ``points`` is the Bézier control polygon (start, c1, c2, end) for
    floating edges and the elbow waypoints for orthogonal edges. ``path`` is
    the same shape as SVG path data.
    """

    source_anchor: Anchor
    target_anchor: Anchor
    path: str
    points: tuple[Point, ...]
    label_point: Point


# ─── Side Resolution ──────────────────────────────────────────────────────────


def facing_side(rect: Rect, other: Rect) -> Side:
    """Side of ``rect`` that faces the centre of ``other``.

    Horizontal dominance (|Δx| > |Δy|) picks left/right; ties and vertical
    dominance pick top/bottom.
    """
    cx, cy = rect.center
    ox, oy = other.center
    if abs(cx - ox) > abs(cy - oy):
        return Side.LEFT if cx > ox else Side.RIGHT
    return Side.TOP if cy > oy else Side.BOTTOM


def anchor_on(rect: Rect, side: Side) -> Anchor:
    """Midpoint of ``side`` on the boundary of ``rect``."""
    cx, cy = rect.center
    if side is Side.LEFT:
        return Anchor(rect.x, cy, side)
    if side is Side.RIGHT:
        return Anchor(rect.x + rect.width, cy, side)
    if side is Side.TOP:
        return Anchor(cx, rect.y, side)
    return Anchor(cx, rect.y + rect.height, side)


# ─── Path Construction ────────────────────────────────────────────────────────


def _fmt(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _path_data(points: tuple[Point, ...], curve: bool) -> str:
    head = f"M{_fmt(points[0].x)},{_fmt(points[0].y)}"
    rest = " ".join(f"{_fmt(p.x)},{_fmt(p.y)}" for p in points[1:])
    if curve:
        return f"{head} C{rest}"
    return f"{head} " + " ".join(f"L{_fmt(p.x)},{_fmt(p.y)}" for p in points[1:])


def bezier_points(source: Anchor, target: Anchor, curvature: float = CURVATURE) -> tuple[Point, ...]:
    """Control polygon of the cubic joining two anchors.

    Horizontal anchors offset both control points along x by ``curvature``
    of the horizontal span; vertical anchors offset along y.
    """
    sx, sy, tx, ty = source.x, source.y, target.x, target.y
    if source.side.is_horizontal:
        offset = (tx - sx) * curvature
        c1, c2 = Point(sx + offset, sy), Point(tx - offset, ty)
    else:
        offset = (ty - sy) * curvature
        c1, c2 = Point(sx, sy + offset), Point(tx, ty - offset)
    return (Point(sx, sy), c1, c2, Point(tx, ty))


def _bezier_midpoint(points: tuple[Point, ...]) -> Point:
    p0, p1, p2, p3 = points
    return Point(
        (p0.x + 3 * p1.x + 3 * p2.x + p3.x) / 8,
        (p0.y + 3 * p1.y + 3 * p2.y + p3.y) / 8,
    )


def elbow_waypoints(source: Anchor, target: Anchor) -> tuple[Point, ...]:
    """Axis-aligned waypoints from ``source`` to ``target``.

    Leaves the source vertically, crosses horizontally at the mid-height
    between the anchors, and enters the target vertically. Aligned anchors
    collapse to a straight segment.
    """
    start = Point(source.x, source.y)
    end = Point(target.x, target.y)
    if source.x == target.x:
        return (start, end)
    mid_y = (source.y + target.y) / 2
    return (start, Point(source.x, mid_y), Point(target.x, mid_y), end)


# ─── Resolution ───────────────────────────────────────────────────────────────


def resolve_floating(source: Rect, target: Rect, curvature: float = CURVATURE) -> EdgeGeometry:
    """Floating (curved) geometry between two rectangles."""
    source_anchor = anchor_on(source, facing_side(source, target))
    target_anchor = anchor_on(target, facing_side(target, source))
    points = bezier_points(source_anchor, target_anchor, curvature)
    return EdgeGeometry(
        source_anchor=source_anchor,
        target_anchor=target_anchor,
        path=_path_data(points, curve=True),
        points=points,
        label_point=_bezier_midpoint(points),
    )


def resolve_orthogonal(
    source: Rect,
    target: Rect,
    source_side: Side = Side.BOTTOM,
    target_side: Side = Side.TOP,
) -> EdgeGeometry:
    """Orthogonal (elbow) geometry with fixed vertical attachment.

    ``source_side`` and ``target_side`` must be TOP or BOTTOM; the default
    pair runs bottom-of-source to top-of-target regardless of where the
    rectangles sit relative to each other.
    """
    if source_side.is_horizontal or target_side.is_horizontal:
        raise ValueError("orthogonal edges attach to TOP or BOTTOM sides only")
    source_anchor = anchor_on(source, source_side)
    target_anchor = anchor_on(target, target_side)
    points = elbow_waypoints(source_anchor, target_anchor)
    mid = len(points) // 2
    label_point = Point((points[mid - 1].x + points[mid].x) / 2, (points[mid - 1].y + points[mid].y) / 2)
    return EdgeGeometry(
        source_anchor=source_anchor,
        target_anchor=target_anchor,
        path=_path_data(points, curve=False),
        points=points,
        label_point=label_point,
    )


def resolve_edge(edge: Edge, nodes: Mapping[str, Node]) -> EdgeGeometry | None:
    """Geometry for ``edge`` against the current ``nodes``.

    Returns None when either endpoint is missing, which happens transiently
    while a graph is being updated; callers skip the edge for that frame.
    """
    source = nodes.get(edge.source)
    target = nodes.get(edge.target)
    if source is None or target is None:
        logger.debug("No geometry for edge %s: endpoint missing", edge.id)
        return None
    if edge.render_kind is RenderKind.ORTHOGONAL:
        return resolve_orthogonal(source.rect, target.rect)
    return resolve_floating(source.rect, target.rect)
