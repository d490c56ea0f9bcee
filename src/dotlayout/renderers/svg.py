"""SVG renderer — static preview of a positioned graph.

Edge geometry is resolved against the node rectangles at render time;
edges whose endpoints are missing are skipped.
"""

from __future__ import annotations

from dotlayout.geometry import EdgeGeometry, resolve_edge
from dotlayout.graph import Edge, Graph, Node

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 14
FONT_FAMILY = "sans-serif"
PADDING = 20  # canvas padding in pixels

DEFAULT_FILL = "white"
DEFAULT_STROKE = "black"

_DASHED_STYLES = {"dashed": 'stroke-dasharray="6 4"', "dotted": 'stroke-dasharray="2 3"'}
STROKE_WIDTH = "1.5"
_BOLD_STROKE_WIDTH = "3"


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


def _num(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def _style_tokens(style: str | None) -> list[str]:
    if not style:
        return []
    return [token.strip().lower() for token in style.split(",") if token.strip()]


def _stroke_attrs(style: str | None) -> str:
    tokens = _style_tokens(style)
    width = _BOLD_STROKE_WIDTH if "bold" in tokens else STROKE_WIDTH
    parts = [f'stroke-width="{width}"']
    parts.extend(_DASHED_STYLES[token] for token in tokens if token in _DASHED_STYLES)
    return " ".join(parts)


# ─── Shape Rendering ────────────────────────────────────────────────────────


def _render_node(node: Node) -> str:
    x, y, w, h = node.position.x, node.position.y, node.width, node.height
    cx, cy = x + w / 2, y + h / 2
    fill = _escape(node.style.background or DEFAULT_FILL)
    stroke = _escape(node.style.stroke or DEFAULT_STROKE)
    fs = f'fill="{fill}" stroke="{stroke}" {_stroke_attrs(node.style.style)}'

    shape = (node.shape or "box").lower()
    if shape in ("ellipse", "oval", "circle"):
        shape_svg = f'<ellipse cx="{_num(cx)}" cy="{_num(cy)}" rx="{_num(w / 2)}" ry="{_num(h / 2)}" {fs}/>'
    elif shape == "diamond":
        pts = f"{_num(cx)},{_num(y)} {_num(x + w)},{_num(cy)} {_num(cx)},{_num(y + h)} {_num(x)},{_num(cy)}"
        shape_svg = f'<polygon points="{pts}" {fs}/>'
    else:
        rounded = "rounded" in _style_tokens(node.style.style)
        r = min(w, h) / 4 if rounded else 0
        shape_svg = (
            f'<rect x="{_num(x)}" y="{_num(y)}" width="{_num(w)}" height="{_num(h)}" rx="{_num(r)}" {fs}/>'
        )

    label_svg = (
        f'<text x="{_num(cx)}" y="{_num(cy)}" dominant-baseline="central" text-anchor="middle" '
        f"{_font()}>{_escape(node.label)}</text>"
    )
    return f"{shape_svg}\n{label_svg}"


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def _render_edge(edge: Edge, geometry: EdgeGeometry, marker_end: str | None) -> str:
    stroke = _escape(edge.attributes.style.stroke or DEFAULT_STROKE)
    markers = f' marker-end="url(#{marker_end})"' if marker_end else ""
    extra = _stroke_attrs(edge.attributes.style.style)
    parts = [
        f'<path d="{geometry.path}" fill="none" stroke="{stroke}" {extra}{markers}/>',
    ]

    if edge.label is not None:
        lp = geometry.label_point
        font = _font(FONT_SIZE - 2)
        parts.append(
            f'<text x="{_num(lp.x)}" y="{_num(lp.y - 6)}" text-anchor="middle" {font} fill="#333">'
            f"{_escape(edge.label)}</text>"
        )

    return "\n".join(parts)


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a positioned Graph, produces an SVG string."""

    def render(self, graph: Graph) -> str:
        nodes = graph.node_list()
        if not nodes:
            return ""

        min_x = min(n.position.x for n in nodes)
        min_y = min(n.position.y for n in nodes)
        max_x = max(n.position.x + n.width for n in nodes)
        max_y = max(n.position.y + n.height for n in nodes)

        # Shift so the drawing starts at PADDING regardless of layout origin.
        dx = PADDING - min_x
        dy = PADDING - min_y
        svg_w = max_x - min_x + 2 * PADDING
        svg_h = max_y - min_y + 2 * PADDING

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{_num(svg_w)}" height="{_num(svg_h)}" '
            f'viewBox="0 0 {_num(svg_w)} {_num(svg_h)}">',
            "<defs>",
            '  <marker id="arrowhead" markerWidth="10" markerHeight="7" refX="10" refY="3.5" orient="auto">',
            '    <polygon points="0 0, 10 3.5, 0 7" fill="black"/>',
            "  </marker>",
            "</defs>",
            f'<rect width="{_num(svg_w)}" height="{_num(svg_h)}" fill="white"/>',
            f'<g transform="translate({_num(dx)},{_num(dy)})">',
        ]

        # Edges (behind nodes), resolved against the current rectangles.
        marker = "arrowhead" if graph.directed else None
        for edge in graph.edges:
            geometry = resolve_edge(edge, graph.nodes)
            if geometry is None:
                continue
            parts.append(_render_edge(edge, geometry, marker))

        # Nodes (on top)
        for node in nodes:
            parts.append(_render_node(node))

        parts.append("</g>")
        parts.append("</svg>")
        return "\n".join(parts)
