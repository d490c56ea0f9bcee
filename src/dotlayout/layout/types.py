"""Layout parameter types shared across the layout strategies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Sequence

from dotlayout.graph import Edge, Node

# ─── Canvas constants ─────────────────────────────────────────────────────────

CENTER: tuple[float, float] = (400.0, 400.0)
ORIGIN: tuple[float, float] = (100.0, 100.0)  # top-left start for grid / tree layouts
BOUNDS: tuple[float, float, float, float] = (50.0, 50.0, 750.0, 550.0)  # min_x, min_y, max_x, max_y

# Padding added to the widest node when deriving the minimum spacing.
SPACING_PADDING: float = 30.0
# Width assumed for the spacing calculation when every node is narrower.
MIN_NODE_WIDTH: float = 150.0


@dataclass(frozen=True)
class LayoutSpacing:
    """Spacing knobs, in canvas units, used by every strategy."""

    node_spacing: float = 80.0  # horizontal gap between siblings
    level_spacing: float = 120.0  # vertical gap between hierarchy levels
    radius_step: float = 200.0  # ring increment for radial layout
    min_radius: float = 250.0  # smallest circle for circular layout
    grid_spacing: float = 200.0  # cell size for grid layout
    force_repulsion: float = 1.5  # repulsion multiplier for force layout


DEFAULT_SPACING = LayoutSpacing()


@dataclass(frozen=True)
class LayoutParams:
    """Everything a strategy may read. Strategies ignore fields they don't use.

    Attributes:
        spacing: Spacing knobs.
        anchor_id: Node pinned (force) or centred (circular, radial). ``None``
            or an unknown id means "no anchor" for circular/force and
            "highest-degree node" for radial.
        center: Anchor / ring centre.
        origin: Top-left start for grid and hierarchical layouts.
        columns: Grid column override.
        iterations: Force simulation iteration budget.
        seed: Seed for the force layout's initial scatter.
        tolerance: Optional force early exit once the largest per-iteration
            displacement drops below this value.
        bounds: Clamp rectangle for force layout (min_x, min_y, max_x, max_y).
        damping: Force update damping factor.
        attraction: Spring coefficient along edges.
        direction: Hierarchical flow direction: TB, BT, LR or RL.
    """

    spacing: LayoutSpacing = field(default_factory=LayoutSpacing)
    anchor_id: str | None = None
    center: tuple[float, float] = CENTER
    origin: tuple[float, float] = ORIGIN
    columns: int | None = None
    iterations: int = 50
    seed: int = 0
    tolerance: float | None = None
    bounds: tuple[float, float, float, float] = BOUNDS
    damping: float = 0.9
    attraction: float = 0.1
    direction: str = "TB"


DEFAULT_PARAMS = LayoutParams()

LayoutStrategy = Callable[[Sequence[Node], Sequence[Edge], LayoutParams], list[Node]]
