"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from dotlayout.graph import Graph


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, graph: Graph) -> str:
        """Render a positioned graph to an output string."""
        ...
