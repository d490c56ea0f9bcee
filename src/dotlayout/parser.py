"""Parser — DOT-style graph text to ``Graph``.

The grammar handled here is informal and best-effort:

    graphType ws ident? '{' (nodeStmt | edgeStmt | attrStmt)* '}'
    nodeStmt = ident attrList? ';'
    edgeStmt = ident (edgeOp ident)+ attrList? ';'?
    attrList = '[' key '=' value ((',' | ';') key '=' value)* ']'

Passes:
  1. Comment stripping (``//`` and ``/* */``).
  2. Directedness and graph header (``digraph name {``).
  3. Removal of graph-level attribute statements (``rankdir=LR;`` ...).
  4. Statement scan: edge statements and node definitions are matched on a
     masked copy of the text where attribute-list contents are blanked, so
     operators or semicolons inside ``[...]`` never create structure. Matches
     are then applied in text order, so node insertion order is the order of
     first reference.

Malformed fragments are skipped and logged at DEBUG level; only empty or
entirely unreadable input raises ``ParseError``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from dotlayout.errors import ParseError
from dotlayout.graph import (
    DEFAULT_NODE_HEIGHT,
    DEFAULT_NODE_WIDTH,
    FILLED_BACKGROUND,
    Edge,
    EdgeAttributes,
    Graph,
    Node,
    NodeStyle,
    RenderKind,
)

logger = logging.getLogger(__name__)

# ─── Patterns ─────────────────────────────────────────────────────────────────

_LINE_COMMENT_RE = re.compile(r"//.*$", re.MULTILINE)
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)

_DIRECTED_RE = re.compile(r"\bdigraph\b", re.IGNORECASE)
_HEADER_RE = re.compile(
    r'^\s*(?:strict\s+)?(?P<kind>digraph|graph)\b\s*(?P<name>"[^"]*"|\w+)?\s*\{',
    re.IGNORECASE,
)

# Graph-level attribute keywords. These are settings, never nodes.
GRAPH_ATTRIBUTE_KEYS: tuple[str, ...] = (
    "layout",
    "ranksep",
    "concentrate",
    "overlap",
    "splines",
    "nodesep",
    "rankdir",
    "size",
    "ratio",
)

# A statement starts at a line start or right after ``{``, ``}`` or ``;``.
_STATEMENT_START = r"(?:^|(?<=[{};]))\s*"

_GRAPH_ATTR_RE = re.compile(
    _STATEMENT_START + r"\b(?P<key>" + "|".join(GRAPH_ATTRIBUTE_KEYS) + r')\s*=\s*'
    r'(?P<value>"[^"]*"|[^;\n{}]+?)\s*;',
    re.IGNORECASE | re.MULTILINE,
)

# Default-attribute statements: ``node [shape=box];`` and friends.
_DEFAULT_ATTR_RE = re.compile(
    _STATEMENT_START + r"\b(?P<key>node|edge|graph)\s*\[(?P<attrs>[^\]]*)\]\s*;?",
    re.IGNORECASE | re.MULTILINE,
)

_BRACKET_RE = re.compile(r"\[[^\]]*\]")
_QUOTED_RE = re.compile(r'"[^"]*"')

_IDENT = r'"[^"]+"|\w+'
_IDENT_RE = re.compile(_IDENT)
_NODE_DEF_RE = re.compile(r"(?P<id>" + _IDENT + r")(?:\s*\[(?P<attrs>[^\]]*)\])?\s*;")

_ATTR_PAIR_RE = re.compile(r'(\w+)\s*=\s*"([^"]*)"|(\w+)\s*=\s*([^;,\]]+)')
_ATTR_SEPARATORS_RE = re.compile(r"[\s,;]*")

RESERVED_KEYWORDS = frozenset({"node", "edge", "graph", "digraph", "subgraph"})

DIRECTED_OP = "->"
UNDIRECTED_OP = "--"

_ORTHOGONAL_VALUES = frozenset({"ortho", "orthogonal", "step", "smoothstep"})


def _edge_pattern(op: str) -> re.Pattern[str]:
    op_re = re.escape(op)
    return re.compile(
        r"(?P<chain>(?:" + _IDENT + r")(?:\s*" + op_re + r"\s*(?:" + _IDENT + r"))+)"
        r"(?:\s*\[(?P<attrs>[^\]]*)\])?"
    )


# ─── Attribute Lists ──────────────────────────────────────────────────────────


@dataclass
class ParsedAttributes:
    """Attribute list projected onto recognised fields.

    ``raw`` keeps every key/value pair as written (last one wins), which is
    what graph-level statements and render-kind detection read.
    """

    label: str | None = None
    style: NodeStyle = field(default_factory=NodeStyle)
    shape: str | None = None
    extra: dict[str, str] = field(default_factory=dict)
    raw: dict[str, str] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.raw


def parse_attributes(text: str | None) -> ParsedAttributes:
    """Parse the inside of an attribute list, e.g. ``label="Node 1", color=red``.

    Accepts quoted and bare values separated by ``,`` or ``;``. Recognised
    keys map onto structured fields; everything else lands in ``extra``.
    Fragments that are not ``key=value`` pairs are skipped.
    """
    attrs = ParsedAttributes()
    if not text or not text.strip():
        return attrs

    stroke: str | None = None
    background: str | None = None
    style: str | None = None

    leftovers: list[str] = []
    last_end = 0
    for match in _ATTR_PAIR_RE.finditer(text):
        gap = text[last_end : match.start()]
        if _ATTR_SEPARATORS_RE.fullmatch(gap) is None:
            leftovers.append(gap.strip())
        last_end = match.end()

        key = (match.group(1) or match.group(3)).strip()
        value = (match.group(2) if match.group(1) else match.group(4)).strip()
        attrs.raw[key] = value

        if key == "label":
            attrs.label = value
        elif key == "color":
            stroke = value
        elif key == "fillcolor":
            background = value
        elif key == "style":
            style = value
        elif key == "shape":
            attrs.shape = value
        else:
            attrs.extra[key] = value

    tail = text[last_end:]
    if _ATTR_SEPARATORS_RE.fullmatch(tail) is None:
        leftovers.append(tail.strip())
    for fragment in leftovers:
        logger.debug("Skipping malformed attribute fragment %r", fragment)

    if style == "filled" and background is None:
        background = FILLED_BACKGROUND
    attrs.style = NodeStyle(stroke=stroke, background=background, style=style)
    return attrs


# ─── Text Preparation ─────────────────────────────────────────────────────────


def strip_comments(text: str) -> str:
    """Remove ``//`` line comments and ``/* ... */`` block comments."""
    text = _LINE_COMMENT_RE.sub("", text)
    return _BLOCK_COMMENT_RE.sub("", text)


def _mask_brackets(text: str) -> str:
    """Blank out attribute-list contents, keeping every offset unchanged."""
    return _BRACKET_RE.sub(lambda m: "[" + " " * (len(m.group()) - 2) + "]", text)


def _cut_spans(text: str, spans: list[tuple[int, int]]) -> str:
    """Replace each span with spaces so offsets and line structure survive."""
    if not spans:
        return text
    chars = list(text)
    for start, end in spans:
        for i in range(start, end):
            if chars[i] != "\n":
                chars[i] = " "
    return "".join(chars)


def _inside_quotes(start: int, quoted: list[tuple[int, int]]) -> bool:
    return any(qs < start < qe for qs, qe in quoted)


def _unquote(token: str) -> str:
    token = token.strip()
    if len(token) >= 2 and token[0] == '"' and token[-1] == '"':
        return token[1:-1]
    return token


def _extract_graph_attributes(text: str) -> tuple[str, dict[str, str]]:
    """Remove graph-level statements and return (remaining_text, attributes).

    Matching runs on the bracket-masked text so that keys inside a node's
    attribute list (``A [size="3"]``) are never mistaken for statements.
    """
    attributes: dict[str, str] = {}
    spans: list[tuple[int, int]] = []

    masked = _mask_brackets(text)
    for match in _DEFAULT_ATTR_RE.finditer(masked):
        start = match.start("key")
        attrs_start, attrs_end = match.span("attrs")
        prefix = match.group("key").lower()
        parsed = parse_attributes(text[attrs_start:attrs_end])
        for key, value in parsed.raw.items():
            attributes[f"{prefix}.{key}"] = value
        spans.append((start, match.end()))
    text = _cut_spans(text, spans)

    spans = []
    masked = _mask_brackets(text)
    for match in _GRAPH_ATTR_RE.finditer(masked):
        value_start, value_end = match.span("value")
        attributes[match.group("key").lower()] = _unquote(text[value_start:value_end])
        spans.append((match.start("key"), match.end()))
    text = _cut_spans(text, spans)

    return text, attributes


def _is_assignment_value(text: str, start: int, edge_op: str) -> bool:
    """True when the text before ``start`` on the same line reads like ``key =``.

    Only the current statement is inspected (text after the last ``;``,
    ``{`` or ``}`` on the line), so earlier statements on a shared line do not
    leak into the decision.
    """
    line_start = text.rfind("\n", 0, start) + 1
    before = text[line_start:start]
    for sep in (";", "{", "}"):
        cut = before.rfind(sep)
        if cut != -1:
            before = before[cut + 1 :]
    return "=" in before and edge_op not in before


# ─── Parser ───────────────────────────────────────────────────────────────────


class GraphTextParser:
    """Stateful single-use parser; call :func:`parse` for the common case."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.graph = Graph()
        self._edge_counter = 0
        self._default_kind = RenderKind.FLOATING

    def parse(self) -> Graph:
        if self.text is None or not self.text.strip():
            raise ParseError("Cannot parse graph: input is empty")

        cleaned = strip_comments(self.text).strip()
        if not cleaned:
            raise ParseError("Cannot parse graph: input contains only comments")

        header = _HEADER_RE.search(cleaned)
        if header is not None:
            directed = header.group("kind").lower() == "digraph"
        else:
            directed = _DIRECTED_RE.search(cleaned) is not None
        self.graph.directed = directed
        edge_op = DIRECTED_OP if directed else UNDIRECTED_OP

        if header is not None:
            name = header.group("name")
            self.graph.name = _unquote(name) if name else None
            cleaned = cleaned[: header.start()] + "{" + cleaned[header.end() :]

        cleaned, graph_attrs = _extract_graph_attributes(cleaned)
        self.graph.graph_attributes = graph_attrs
        if graph_attrs.get("splines", "").lower() in _ORTHOGONAL_VALUES:
            self._default_kind = RenderKind.ORTHOGONAL

        statements = self._scan(cleaned, edge_op)
        if header is None and not statements and not graph_attrs:
            raise ParseError("Cannot parse graph: no graph header and no readable statements found")

        for _pos, kind, payload in statements:
            if kind == "edge":
                self._apply_edge(*payload)
            else:
                self._apply_node_def(*payload)

        logger.debug(
            "Parsed %s graph %r: %d node(s), %d edge(s)",
            "directed" if directed else "undirected",
            self.graph.name,
            len(self.graph.nodes),
            len(self.graph.edges),
        )
        return self.graph

    # ─── Scanning ────────────────────────────────────────────────────────────

    def _scan(self, text: str, edge_op: str) -> list[tuple[int, str, tuple]]:
        """Find edge statements and node definitions, ordered by position."""
        masked = _mask_brackets(text)
        quoted = [m.span() for m in _QUOTED_RE.finditer(masked)]
        statements: list[tuple[int, str, tuple]] = []
        edge_spans: list[tuple[int, int]] = []

        for match in _edge_pattern(edge_op).finditer(masked):
            if _inside_quotes(match.start(), quoted):
                continue
            chain = match.group("chain")
            endpoints = [_unquote(tok) for tok in _IDENT_RE.findall(chain)]
            attrs_text = None
            if match.group("attrs") is not None:
                a_start, a_end = match.span("attrs")
                attrs_text = text[a_start:a_end]
            statements.append((match.start(), "edge", (endpoints, attrs_text)))
            edge_spans.append(match.span())

        for match in _NODE_DEF_RE.finditer(masked):
            start = match.start()
            if any(s <= start < e for s, e in edge_spans) or _inside_quotes(start, quoted):
                continue
            node_id = _unquote(match.group("id"))
            attrs_text = None
            if match.group("attrs") is not None:
                a_start, a_end = match.span("attrs")
                attrs_text = text[a_start:a_end]

            if _is_assignment_value(masked, start, edge_op):
                logger.debug("Skipping assignment value %r", node_id)
                continue
            if node_id.lower() in RESERVED_KEYWORDS and not (attrs_text and attrs_text.strip()):
                logger.debug("Skipping reserved keyword %r", node_id)
                continue
            statements.append((start, "node", (node_id, attrs_text)))

        statements.sort(key=lambda item: item[0])
        return statements

    # ─── Application ─────────────────────────────────────────────────────────

    def _apply_node_def(self, node_id: str, attrs_text: str | None) -> None:
        attrs = parse_attributes(attrs_text)
        existing = self.graph.nodes.get(node_id)
        if existing is None:
            self.graph.add_node(
                Node(
                    id=node_id,
                    label=attrs.label or node_id,
                    style=attrs.style,
                    shape=attrs.shape,
                    extra=dict(attrs.extra),
                )
            )
            return

        if attrs.is_empty():
            return
        if attrs.label:
            existing.label = attrs.label
        existing.style = existing.style.merged(attrs.style)
        if attrs.shape is not None:
            existing.shape = attrs.shape
        existing.extra.update(attrs.extra)
        if not existing.width:
            existing.width = DEFAULT_NODE_WIDTH
        if not existing.height:
            existing.height = DEFAULT_NODE_HEIGHT

    def _apply_edge(self, endpoints: list[str], attrs_text: str | None) -> None:
        attrs = parse_attributes(attrs_text)
        kind = self._render_kind(attrs)
        for source, target in zip(endpoints, endpoints[1:]):
            edge = Edge(
                id=f"e{source}-{target}-{self._edge_counter}",
                source=source,
                target=target,
                attributes=EdgeAttributes(
                    label=attrs.label,
                    style=attrs.style,
                    shape=attrs.shape,
                    extra=dict(attrs.extra),
                ),
                render_kind=kind,
            )
            self._edge_counter += 1
            self.graph.add_edge(edge)

    def _render_kind(self, attrs: ParsedAttributes) -> RenderKind:
        for key in ("type", "splines"):
            value = attrs.raw.get(key)
            if value is None:
                continue
            if value.lower() in _ORTHOGONAL_VALUES:
                return RenderKind.ORTHOGONAL
            if value.lower() in ("floating", "curved", "spline", "true"):
                return RenderKind.FLOATING
        return self._default_kind


def parse(text: str) -> Graph:
    """Parse DOT-style ``text`` into a ``Graph``.

    Raises:
        ParseError: if the input is empty or nothing in it is readable.
    """
    return GraphTextParser(text).parse()
