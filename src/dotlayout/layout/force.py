"""Force-directed layout — spring-electrical simulation with an optional pinned anchor."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Sequence

from dotlayout.graph import Edge, Node
from dotlayout.layout.common import min_spacing, place, resolve_anchor
from dotlayout.layout.types import DEFAULT_PARAMS, LayoutParams

logger = logging.getLogger(__name__)

# Initial scatter area for nodes that have no position yet.
SCATTER_WIDTH: float = 800.0
SCATTER_HEIGHT: float = 600.0


@dataclass
class _Body:
    """Per-run simulation state for one node. Never stored on ``Node``."""

    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    fixed: bool = False


def _initial_bodies(nodes: Sequence[Node], params: LayoutParams, anchor: Node | None) -> list[_Body]:
    """Seed bodies: anchor at the centre, others at their current position.

    A coordinate of exactly 0 counts as "unplaced" and is replaced by a draw
    from a seeded RNG. Two draws are made for every node so the sequence, and
    hence the result, depends only on node order and seed.
    """
    rng = random.Random(params.seed)
    cx, cy = params.center
    bodies: list[_Body] = []
    for node in nodes:
        rx = rng.random() * SCATTER_WIDTH
        ry = rng.random() * SCATTER_HEIGHT
        if anchor is not None and node.id == anchor.id:
            bodies.append(_Body(node.id, cx, cy, fixed=True))
            continue
        x = node.position.x or rx
        y = node.position.y or ry
        bodies.append(_Body(node.id, x, y))
    return bodies


def force_directed_layout(
    nodes: Sequence[Node],
    edges: Sequence[Edge] = (),
    params: LayoutParams = DEFAULT_PARAMS,
) -> list[Node]:
    """Run ``params.iterations`` steps of a spring-electrical simulation.

    Per iteration:
      1. Reset every body's velocity (forces are not integrated over time).
      2. Pairwise repulsion ``k² / d²`` with ``k = spacing * force_repulsion``.
      3. Hooke attraction ``d * attraction`` along every edge.
      4. Damped position update; non-pinned bodies are clamped to
         ``params.bounds`` and the pinned anchor is forced back to the centre.

    Distances are floored at 1 so coincident bodies never divide by zero.
    With ``params.tolerance`` set, the loop stops early once the largest
    displacement of an iteration falls below it.
    """
    if not nodes:
        return []

    anchor = resolve_anchor(nodes, params.anchor_id)
    bodies = _initial_bodies(nodes, params, anchor)
    by_id = {body.id: body for body in bodies}

    spacing = min_spacing(nodes, params.spacing.node_spacing)
    k = spacing * params.spacing.force_repulsion
    repulsion = k * k
    attraction = params.attraction
    damping = params.damping
    cx, cy = params.center
    min_x, min_y, max_x, max_y = params.bounds

    springs = [(by_id[e.source], by_id[e.target]) for e in edges if e.source in by_id and e.target in by_id]

    for iteration in range(max(params.iterations, 0)):
        for body in bodies:
            body.vx = 0.0
            body.vy = 0.0

        for i, a in enumerate(bodies):
            for b in bodies[i + 1 :]:
                dx = b.x - a.x
                dy = b.y - a.y
                distance = math.hypot(dx, dy) or 1.0
                force = repulsion / (distance * distance)
                fx = dx / distance * force
                fy = dy / distance * force
                a.vx -= fx
                a.vy -= fy
                b.vx += fx
                b.vy += fy

        for source, target in springs:
            dx = target.x - source.x
            dy = target.y - source.y
            distance = math.hypot(dx, dy) or 1.0
            force = distance * attraction
            fx = dx / distance * force
            fy = dy / distance * force
            source.vx += fx
            source.vy += fy
            target.vx -= fx
            target.vy -= fy

        largest_move = 0.0
        for body in bodies:
            if body.fixed:
                body.x, body.y = cx, cy
                continue
            new_x = min(max(body.x + body.vx * damping, min_x), max_x)
            new_y = min(max(body.y + body.vy * damping, min_y), max_y)
            largest_move = max(largest_move, abs(new_x - body.x), abs(new_y - body.y))
            body.x, body.y = new_x, new_y

        if params.tolerance is not None and largest_move < params.tolerance:
            logger.debug("Force layout settled after %d iteration(s)", iteration + 1)
            break

    for body in bodies:
        if body.fixed:
            body.x, body.y = cx, cy

    return place(nodes, {body.id: (body.x, body.y) for body in bodies})
