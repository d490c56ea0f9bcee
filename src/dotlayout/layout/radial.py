"""Radial layout — concentric rings around a centre node (twopi-style).

Phases:
  1. Centre selection (anchor, else highest degree, else first node)
  2. Forward-only leveling from the centre (cycle-safe)
  3. Per ring, barycenter ordering by the circular mean of parent angles
  4. Even angular slots in sorted order, ring radius sized to fit its nodes
"""

from __future__ import annotations

import math
from typing import Sequence

import networkx as nx

from dotlayout.graph import Edge, Node
from dotlayout.layout.common import assign_levels, build_digraph, min_spacing, place, resolve_anchor
from dotlayout.layout.types import DEFAULT_PARAMS, LayoutParams

TWO_PI = 2 * math.pi


def pick_center(nodes: Sequence[Node], graph: nx.MultiDiGraph, anchor_id: str | None) -> str:
    """Anchor if valid, else the highest-degree node (first on ties)."""
    anchor = resolve_anchor(nodes, anchor_id)
    if anchor is not None:
        return anchor.id
    return max((node.id for node in nodes), key=lambda node_id: graph.degree(node_id))


def circular_mean(angles: Sequence[float]) -> float | None:
    """Mean direction of ``angles`` (radians), normalised into [0, 2π).

    Each angle becomes a unit vector; the vectors are averaged and converted
    back with atan2. Returns None for an empty sequence.
    """
    if not angles:
        return None
    sum_sin = sum(math.sin(a) for a in angles)
    sum_cos = sum(math.cos(a) for a in angles)
    mean = math.atan2(sum_sin / len(angles), sum_cos / len(angles))
    if mean < 0:
        mean += TWO_PI
    return mean


def ring_radius(level: int, count: int, base: float, radius_step: float, spacing: float) -> float:
    """Radius of ring ``level``: the stepped radius, grown to fit ``count`` nodes."""
    radius = base + level * radius_step
    if level > 0 and count > 0:
        radius = max(radius, count * spacing / TWO_PI)
    return radius


def radial_levels(nodes: Sequence[Node], graph: nx.MultiDiGraph, center: str) -> dict[str, int]:
    """Ring index per node. Nodes the centre cannot reach go on an outer ring."""
    levels = assign_levels(graph, [center])
    unreached = [node.id for node in nodes if node.id not in levels]
    if unreached:
        outer = max(levels.values()) + 1
        for node_id in unreached:
            levels[node_id] = outer
    return levels


def radial_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    params: LayoutParams = DEFAULT_PARAMS,
) -> list[Node]:
    """Place the centre node in the middle and every other level on a ring.

    Within ring k > 0, nodes are sorted by the circular mean of their
    parents' angles, where a parent is the source of an edge spanning
    exactly one level inward. Nodes without a resolvable mean sort first,
    keeping their input order. Sorted nodes then take the evenly spaced
    slots ``2π·i / count``, so the slot, not the mean itself, is the final
    angle.
    """
    if not nodes:
        return []

    graph = build_digraph(nodes, edges)
    center = pick_center(nodes, graph, params.anchor_id)
    levels = radial_levels(nodes, graph, center)

    rings: dict[int, list[str]] = {}
    for node in nodes:
        rings.setdefault(levels[node.id], []).append(node.id)

    parents: dict[str, list[str]] = {}
    for source, target in graph.edges():
        if levels[target] == levels[source] + 1:
            parents.setdefault(target, []).append(source)

    angles: dict[str, float] = {center: 0.0}
    for level in sorted(rings):
        if level == 0:
            continue
        members = rings[level]
        barycenters: dict[str, float | None] = {}
        for node_id in members:
            parent_angles = [angles[p] for p in parents.get(node_id, []) if p in angles]
            barycenters[node_id] = circular_mean(parent_angles)

        ordered = sorted(
            members,
            key=lambda node_id: (
                barycenters[node_id] is not None,
                barycenters[node_id] if barycenters[node_id] is not None else 0.0,
            ),
        )
        for slot, node_id in enumerate(ordered):
            angles[node_id] = TWO_PI * slot / len(members)

    spacing = min_spacing(nodes, params.spacing.node_spacing)
    cx, cy = params.center

    positions: dict[str, tuple[float, float]] = {}
    for node in nodes:
        level = levels[node.id]
        if level == 0:
            positions[node.id] = (cx, cy)
            continue
        radius = ring_radius(level, len(rings[level]), spacing, params.spacing.radius_step, spacing)
        angle = angles[node.id]
        positions[node.id] = (cx + radius * math.cos(angle), cy + radius * math.sin(angle))

    return place(nodes, positions)
