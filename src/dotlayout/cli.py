"""Command-line front end: parse a graph file, lay it out, print JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from dotlayout.config import load_settings
from dotlayout.errors import DotLayoutError
from dotlayout.export import graph_to_dict
from dotlayout.layout import LAYOUTS, layout_graph
from dotlayout.parser import parse
from dotlayout.renderers import Renderer, SvgRenderer

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dotlayout",
        description="Parse a DOT-style graph and compute node positions",
    )
    parser.add_argument("path", help="Path to the graph source file ('-' for stdin)")
    parser.add_argument(
        "--layout",
        help=f"Layout strategy ({', '.join(sorted(LAYOUTS))}); default: graph attribute, then circular",
    )
    parser.add_argument("--anchor", help="Node id to centre (circular, radial) or pin (force)")
    parser.add_argument("--columns", type=int, help="Grid column count")
    parser.add_argument("--iterations", type=int, help="Force simulation iterations")
    parser.add_argument("--seed", type=int, help="Seed for the force layout's initial scatter")
    parser.add_argument(
        "--direction",
        type=str.upper,
        choices=["TB", "BT", "LR", "RL"],
        help="Hierarchical flow direction",
    )
    parser.add_argument("--config", help="Settings file (default: ./dotlayout.toml if present)")
    parser.add_argument(
        "--geometry",
        action="store_true",
        help="Include resolved edge geometry (anchors and path) in the output",
    )
    parser.add_argument("--svg", help="Also write an SVG preview to the given path")
    parser.add_argument("--output", "-o", help="Write JSON to this path instead of stdout")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    return parser


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise DotLayoutError(f"Cannot read {path}: {exc}") from exc


def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config).override(
        layout=args.layout,
        anchor=args.anchor,
        columns=args.columns,
        iterations=args.iterations,
        seed=args.seed,
        direction=args.direction,
    )

    logger.info("Parsing graph from %s", args.path)
    graph = parse(_read_source(args.path))
    positioned = layout_graph(graph, settings.layout, settings.to_params())
    logger.info(
        "Laid out %d node(s) and %d edge(s)",
        len(positioned.nodes),
        len(positioned.edges),
    )

    payload = json.dumps(graph_to_dict(positioned, include_geometry=args.geometry), indent=2)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote layout to %s", args.output)
    else:
        print(payload)

    if args.svg:
        renderer: Renderer = SvgRenderer()
        Path(args.svg).write_text(renderer.render(positioned), encoding="utf-8")
        logger.info("Wrote SVG preview to %s", args.svg)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level)
    try:
        return run(args)
    except DotLayoutError as exc:
        logger.error("%s", exc)
        return 1
