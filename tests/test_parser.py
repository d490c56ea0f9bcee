"""Tests for parser.py — DOT-style text to Graph.

Covers:
  - directed / undirected detection and edge operators
  - node definitions, quoted ids, repeated-definition merge
  - graph-level and default-attribute statements (never nodes)
  - assignment-value disambiguation and reserved keywords
  - attribute projection (label, color, fillcolor, style, shape, extra)
  - render kind selection, edge chains, deterministic ids
  - ParseError for empty / unreadable input
"""

from __future__ import annotations

import pytest

from dotlayout.errors import DotLayoutError, ParseError
from dotlayout.graph import DEFAULT_NODE_HEIGHT, DEFAULT_NODE_WIDTH, RenderKind
from dotlayout.parser import parse, parse_attributes, strip_comments

# ─── Helpers ──────────────────────────────────────────────────────────────────


def node_ids(text: str) -> list[str]:
    """Parse ``text`` and return node ids in insertion order."""
    return list(parse(text).nodes)


def edge_pairs(text: str) -> list[tuple[str, str]]:
    """Parse ``text`` and return (source, target) for every edge, in order."""
    return [(e.source, e.target) for e in parse(text).edges]


# ─── Scenarios ────────────────────────────────────────────────────────────────


class TestBasicGraphs:
    def test_directed_labeled_edge(self):
        """digraph with a labelled edge: 3 nodes, 2 edges, label on the first only."""
        graph = parse('digraph G { A -> B [label="go"]; B -> C; }')
        assert graph.directed is True
        assert list(graph.nodes) == ["A", "B", "C"]
        assert len(graph.edges) == 2
        assert graph.edges[0].label == "go"
        assert graph.edges[1].label is None

    def test_undirected_graph(self):
        """graph with the -- operator: directed flag false, one edge between A and B."""
        graph = parse("graph G { A -- B; }")
        assert graph.directed is False
        assert len(graph.edges) == 1
        assert {graph.edges[0].source, graph.edges[0].target} == {"A", "B"}

    def test_graph_name(self):
        """The identifier after the keyword becomes the graph name."""
        assert parse("digraph Flow { A -> B; }").name == "Flow"
        assert parse('digraph "My Flow" { A -> B; }').name == "My Flow"
        assert parse("digraph { A -> B; }").name is None

    def test_directed_op_ignored_in_undirected_graph(self):
        """-> is not an edge operator in an undirected graph."""
        graph = parse("graph { A -> B; }")
        assert graph.directed is False
        assert graph.edges == []

    def test_header_keyword_decides_direction(self):
        """A "digraph" inside a label does not make a graph directed."""
        graph = parse('graph G { A [label="digraph"]; A -- B; }')
        assert graph.directed is False
        assert graph.nodes["A"].label == "digraph"
        assert len(graph.edges) == 1
        assert (graph.edges[0].source, graph.edges[0].target) == ("A", "B")

    def test_edge_endpoints_exist(self):
        """Every edge endpoint is a node: no orphan references."""
        graph = parse("digraph { X -> Y; Y -> Z; Z -> X; W; }")
        ids = set(graph.nodes)
        for edge in graph.edges:
            assert edge.source in ids
            assert edge.target in ids


# ─── Nodes ────────────────────────────────────────────────────────────────────


class TestNodeDefinitions:
    def test_standalone_node(self):
        """A bare definition creates a node with defaults."""
        graph = parse("digraph { A; }")
        node = graph.nodes["A"]
        assert node.label == "A"
        assert node.width == DEFAULT_NODE_WIDTH
        assert node.height == DEFAULT_NODE_HEIGHT
        assert (node.position.x, node.position.y) == (0.0, 0.0)

    def test_quoted_ids_with_spaces(self):
        """Quoted identifiers may contain spaces, on nodes and edges."""
        graph = parse('digraph { "Node One" -> "Node Two" [label="x"]; "Solo Node" [label="Hi"]; }')
        assert list(graph.nodes) == ["Node One", "Node Two", "Solo Node"]
        assert graph.nodes["Solo Node"].label == "Hi"

    def test_insertion_order_is_first_reference(self):
        """Node order follows the first mention, definition or edge."""
        assert node_ids("digraph { C -> A; B; A [label=x]; }") == ["C", "A", "B"]

    def test_repeated_definition_merges(self):
        """A second definition overrides the label and merges style fields."""
        graph = parse('digraph { A [label="First", color=red]; A [fillcolor=blue]; A [label="Second"]; }')
        node = graph.nodes["A"]
        assert node.label == "Second"
        assert node.style.stroke == "red"
        assert node.style.background == "blue"

    def test_definition_after_edge_updates_node(self):
        """Attributes given after an edge auto-created the node still apply."""
        graph = parse('digraph { A -> B; B [label="Bee", shape=ellipse]; }')
        assert graph.nodes["B"].label == "Bee"
        assert graph.nodes["B"].shape == "ellipse"

    def test_edge_label_does_not_leak_onto_target(self):
        """An edge attribute list belongs to the edge, not its target node."""
        graph = parse('digraph { A -> B [label="go"]; }')
        assert graph.nodes["B"].label == "B"


# ─── Graph-level statements ───────────────────────────────────────────────────


class TestGraphStatements:
    def test_graph_attributes_are_not_nodes(self):
        """rankdir / layout / splines ... are captured, never turned into nodes."""
        graph = parse("digraph { rankdir=LR; layout=dot; ranksep=1.2; A -> B; }")
        assert list(graph.nodes) == ["A", "B"]
        assert graph.graph_attributes["rankdir"] == "LR"
        assert graph.graph_attributes["layout"] == "dot"
        assert graph.graph_attributes["ranksep"] == "1.2"

    def test_quoted_graph_attribute(self):
        """Quoted graph attribute values are unquoted."""
        graph = parse('digraph { size="8,5"; A; }')
        assert graph.graph_attributes["size"] == "8,5"
        assert list(graph.nodes) == ["A"]

    def test_default_attribute_statements(self):
        """node [...] / edge [...] defaults are recorded with a prefix."""
        graph = parse("digraph { node [shape=box]; edge [color=gray]; A -> B; }")
        assert list(graph.nodes) == ["A", "B"]
        assert graph.graph_attributes["node.shape"] == "box"
        assert graph.graph_attributes["edge.color"] == "gray"

    def test_graph_key_inside_node_attributes(self):
        """A graph keyword inside a node's attribute list is just an attribute."""
        graph = parse('digraph { A [size="3"]; }')
        assert "size" not in graph.graph_attributes
        assert graph.nodes["A"].extra == {"size": "3"}

    def test_assignment_value_is_not_a_node(self):
        """In foo = bar; the bar is a value, not a node declaration."""
        assert node_ids("digraph { A -> B; foo = bar; }") == ["A", "B"]

    def test_reserved_keyword_without_attributes(self):
        """Bare structural keywords are skipped."""
        assert node_ids("digraph { edge; A; }") == ["A"]


# ─── Attributes ───────────────────────────────────────────────────────────────


class TestAttributes:
    def test_recognised_keys(self):
        """label / color / fillcolor / style / shape map onto structured fields."""
        attrs = parse_attributes('label="Hello World", color=red, fillcolor="#eee", style=dashed, shape=box')
        assert attrs.label == "Hello World"
        assert attrs.style.stroke == "red"
        assert attrs.style.background == "#eee"
        assert attrs.style.style == "dashed"
        assert attrs.shape == "box"
        assert attrs.extra == {}

    def test_unrecognised_keys_pass_through(self):
        """Unknown keys are kept verbatim in the extension map."""
        attrs = parse_attributes("weight=3; penwidth=2")
        assert attrs.extra == {"weight": "3", "penwidth": "2"}

    def test_filled_without_fillcolor(self):
        """style=filled with no fill colour gets a white background."""
        graph = parse("digraph { A [style=filled]; }")
        assert graph.nodes["A"].style.background == "#fff"
        assert graph.nodes["A"].style.style == "filled"

    def test_malformed_fragment_skipped(self):
        """Garbage inside an attribute list is skipped, the rest is kept."""
        graph = parse('digraph { A [label="ok", ???]; B; }')
        assert graph.nodes["A"].label == "ok"
        assert "B" in graph.nodes

    def test_empty_attribute_list(self):
        """Empty or missing attribute text yields an empty result."""
        assert parse_attributes("").is_empty()
        assert parse_attributes(None).is_empty()

    def test_edge_style(self):
        """Edge colour lands on the edge style."""
        graph = parse("digraph { A -> B [color=red, weight=2]; }")
        attrs = graph.edges[0].attributes
        assert attrs.style.stroke == "red"
        assert attrs.extra == {"weight": "2"}


# ─── Edges ────────────────────────────────────────────────────────────────────


class TestEdges:
    def test_edge_ids(self):
        """Ids combine source, target and a running counter."""
        graph = parse("digraph { A -> B; B -> C; }")
        assert [e.id for e in graph.edges] == ["eA-B-0", "eB-C-1"]

    def test_parallel_edges_have_unique_ids(self):
        """Two edges between the same pair stay distinct."""
        graph = parse("digraph { A -> B; A -> B; }")
        ids = [e.id for e in graph.edges]
        assert len(ids) == 2
        assert len(set(ids)) == 2

    def test_edge_chain(self):
        """A -> B -> C expands into consecutive edges sharing attributes."""
        graph = parse('digraph { A -> B -> C [label="x"]; }')
        assert [(e.source, e.target) for e in graph.edges] == [("A", "B"), ("B", "C")]
        assert all(e.label == "x" for e in graph.edges)

    def test_operator_inside_label_is_not_an_edge(self):
        """An edge operator inside a quoted label creates no structure."""
        graph = parse('digraph { A [label="X -> Y"]; }')
        assert list(graph.nodes) == ["A"]
        assert graph.edges == []

    def test_default_render_kind(self):
        """Edges default to the floating kind."""
        graph = parse("digraph { A -> B; }")
        assert graph.edges[0].render_kind is RenderKind.FLOATING

    def test_orthogonal_edge_attribute(self):
        """type=orthogonal on an edge selects the orthogonal kind for that edge only."""
        graph = parse("digraph { A -> B [type=orthogonal]; B -> C; }")
        assert graph.edges[0].render_kind is RenderKind.ORTHOGONAL
        assert graph.edges[1].render_kind is RenderKind.FLOATING

    def test_graph_splines_ortho(self):
        """splines=ortho at graph level makes orthogonal the default."""
        graph = parse("digraph { splines=ortho; A -> B; }")
        assert graph.edges[0].render_kind is RenderKind.ORTHOGONAL


# ─── Comments and determinism ─────────────────────────────────────────────────


class TestComments:
    def test_strip_comments(self):
        """Line and block comments are removed."""
        assert strip_comments("A; // note\nB; /* gone\n */ C;").split() == ["A;", "B;", "C;"]

    def test_commented_statements_ignored(self):
        """Statements inside comments never reach the graph."""
        text = "digraph {\n  // A -> B;\n  /* C -> D; */\n  E -> F;\n}"
        assert edge_pairs(text) == [("E", "F")]
        assert node_ids(text) == ["E", "F"]


class TestDeterminism:
    def test_same_input_same_output(self):
        """Identical text gives identical node order, edge order and ids."""
        text = 'digraph { B -> A; C [label="c"]; A -> C; C -> B; }'
        first, second = parse(text), parse(text)
        assert list(first.nodes) == list(second.nodes)
        assert [e.id for e in first.edges] == [e.id for e in second.edges]


# ─── Failures ─────────────────────────────────────────────────────────────────


class TestParseErrors:
    @pytest.mark.parametrize("text", ["", "   \n\t", "// only a comment", "/* block */"])
    def test_empty_input(self, text):
        """Empty or comment-only input is reported."""
        with pytest.raises(ParseError):
            parse(text)

    def test_unreadable_input(self):
        """No header and no statements is unreadable."""
        with pytest.raises(ParseError):
            parse("!!! ???")

    def test_parse_error_hierarchy(self):
        """ParseError is both a DotLayoutError and a ValueError."""
        with pytest.raises(DotLayoutError):
            parse("")
        with pytest.raises(ValueError):
            parse("")

    def test_empty_graph_body(self):
        """A header with an empty body is a valid, empty graph."""
        graph = parse("digraph G { }")
        assert graph.nodes == {}
        assert graph.edges == []
