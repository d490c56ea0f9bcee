"""End-to-end: text → parse → layout → geometry / SVG, for every strategy."""

import math
from pathlib import Path

import pytest

from dotlayout import graph_to_dict, layout_graph, parse, resolve_edge
from dotlayout.graph import Edge, Graph, Node
from dotlayout.layout import LAYOUTS
from dotlayout.renderers import SvgRenderer

FIXTURES_DIR = Path(__file__).parent / "fixtures"

SAMPLE = """
digraph Pipeline {
    rankdir=TB;
    node [shape=box];

    // sources
    ingest [label="Ingest", fillcolor="#e0f0ff", style=filled];
    "clean data" [label="Clean <data>"];

    ingest -> "clean data" [label="raw"];
    "clean data" -> model -> report;
    model -> ingest [style=dashed];
    report -> archive [type=orthogonal];
    orphan;
}
"""


def find_fixtures() -> list[Path]:
    """All .dot files under the fixtures directory."""
    return sorted(FIXTURES_DIR.glob("*.dot"))


FIXTURES = find_fixtures()


@pytest.mark.parametrize("name", sorted(LAYOUTS))
def test_every_layout_places_every_node(name: str) -> None:
    """Each strategy gives every parsed node a finite position and every edge a path."""
    graph = layout_graph(parse(SAMPLE), name)
    assert list(graph.nodes) == ["ingest", "clean data", "model", "report", "archive", "orphan"]
    for node in graph.node_list():
        assert math.isfinite(node.position.x)
        assert math.isfinite(node.position.y)
    for edge in graph.edges:
        geometry = resolve_edge(edge, graph.nodes)
        assert geometry is not None
        assert geometry.path.startswith("M")


@pytest.mark.parametrize("name", sorted(LAYOUTS))
def test_svg_render(name: str) -> None:
    """The SVG preview draws one path per edge and one label per node."""
    graph = layout_graph(parse(SAMPLE), name)
    svg = SvgRenderer().render(graph)
    assert svg.startswith("<svg")
    assert svg.endswith("</svg>")
    assert svg.count("<path ") == len(graph.edges)
    assert "Clean &lt;data&gt;" in svg
    assert 'marker-end="url(#arrowhead)"' in svg


def test_svg_styles() -> None:
    """Fill colours, shapes and dashed edges reach the SVG."""
    svg = SvgRenderer().render(layout_graph(parse(SAMPLE), "hierarchical"))
    assert 'fill="#e0f0ff"' in svg
    assert "stroke-dasharray" in svg
    assert " L" in svg  # orthogonal report -> archive


def test_svg_style_lists_with_spaces() -> None:
    """Comma-space style lists are split into clean tokens."""
    graph = layout_graph(parse('digraph { A [style="filled, dashed"]; B [style="rounded, bold"]; A -> B; }'), "grid")
    svg = SvgRenderer().render(graph)
    assert 'stroke-dasharray="6 4"' in svg
    assert 'stroke-width="3"' in svg
    assert 'rx="10"' in svg


def test_svg_bold_replaces_default_width() -> None:
    """A bold element carries a single stroke-width attribute."""
    svg = SvgRenderer().render(layout_graph(parse('digraph { A [style="bold"]; }'), "grid"))
    rect = next(line for line in svg.splitlines() if line.startswith("<rect x="))
    assert rect.count("stroke-width=") == 1
    assert 'stroke-width="3"' in rect


def test_undirected_has_no_arrows() -> None:
    """Undirected graphs draw edges without arrowheads."""
    svg = SvgRenderer().render(layout_graph(parse("graph { a -- b; b -- c; }"), "circular"))
    assert "marker-end" not in svg
    assert svg.count("<path ") == 2


def test_svg_skips_edges_with_missing_endpoints() -> None:
    """An edge whose endpoint is gone is not drawn."""
    graph = Graph(
        nodes={"a": Node(id="a").moved_to(0, 0), "b": Node(id="b").moved_to(0, 200)},
        edges=[Edge(id="e1", source="a", target="b"), Edge(id="e2", source="a", target="gone")],
    )
    assert SvgRenderer().render(graph).count("<path ") == 1


def test_empty_graph_renders_nothing() -> None:
    assert SvgRenderer().render(parse("digraph { }")) == ""


def test_relayout_same_graph() -> None:
    """One parsed graph can be laid out repeatedly with different strategies."""
    graph = parse(SAMPLE)
    grid = layout_graph(graph, "grid")
    radial = layout_graph(graph, "radial")
    again = layout_graph(graph, "grid")
    assert graph_to_dict(grid) == graph_to_dict(again)
    assert graph_to_dict(grid) != graph_to_dict(radial)


@pytest.mark.parametrize("path", FIXTURES, ids=[p.stem for p in FIXTURES])
def test_fixture_files(path: Path) -> None:
    """Every fixture parses and lays out with its own layout attribute."""
    graph = layout_graph(parse(path.read_text(encoding="utf-8")))
    assert graph.nodes
    for edge in graph.edges:
        assert edge.source in graph.nodes
        assert edge.target in graph.nodes
