"""Exception hierarchy shared by the parser, layout engines and CLI."""

from __future__ import annotations


class DotLayoutError(Exception):
    """Base class for every error raised by dotlayout."""


class ParseError(DotLayoutError, ValueError):
    """The input text is empty or contains no readable graph at all.

    Malformed fragments inside an otherwise readable graph never raise;
    the parser skips them.
    """


class LayoutError(DotLayoutError, RuntimeError):
    """An external layout engine failed or returned an unusable response.

    The graph handed to the engine is left untouched so callers can keep it
    as the fallback positioned graph.
    """
