"""Layout settings loaded from a TOML file.

Example ``dotlayout.toml``::

    [layout]
    name = "radial"
    anchor = "hub"
    seed = 7
    iterations = 80
    columns = 4
    direction = "LR"

    [layout.spacing]
    node_spacing = 100
    radius_step = 180

Every key is optional. A missing file gives the defaults; a file that
cannot be read or holds values of the wrong type is reported at WARNING
level and the defaults are used instead.
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

from dotlayout.layout.types import LayoutParams, LayoutSpacing

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "dotlayout.toml"


@dataclass
class Settings:
    """Layout choices shared by the CLI and library callers.

    ``layout`` of None means "use the graph's own ``layout=`` attribute, or
    the default strategy".
    """

    layout: str | None = None
    anchor: str | None = None
    seed: int = 0
    iterations: int = 50
    columns: int | None = None
    direction: str = "TB"
    tolerance: float | None = None
    spacing: LayoutSpacing = field(default_factory=LayoutSpacing)

    def to_params(self) -> LayoutParams:
        return LayoutParams(
            spacing=self.spacing,
            anchor_id=self.anchor,
            columns=self.columns,
            iterations=self.iterations,
            seed=self.seed,
            tolerance=self.tolerance,
            direction=self.direction,
        )

    def override(self, **values: Any) -> Settings:
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in values.items() if v is not None})


# ─── Parsing ──────────────────────────────────────────────────────────────────


def _expect(value: Any, kinds: tuple[type, ...], key: str) -> Any:
    # bool is an int subclass; never accept it for numeric keys
    if isinstance(value, bool) or not isinstance(value, kinds):
        raise TypeError(f"{key} must be {' or '.join(k.__name__ for k in kinds)}, got {value!r}")
    return value


def _parse_spacing(data: dict[str, Any]) -> LayoutSpacing:
    spacing = LayoutSpacing()
    known = {f.name for f in fields(LayoutSpacing)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.debug("Ignoring unknown spacing key %r", key)
            continue
        values[key] = float(_expect(value, (int, float), f"layout.spacing.{key}"))
    return replace(spacing, **values)


def parse_settings(data: dict[str, Any]) -> Settings:
    """Build ``Settings`` from parsed TOML data.

    Raises:
        TypeError: if a known key holds a value of the wrong type.
    """
    settings = Settings()
    section = data.get("layout", {})
    if not isinstance(section, dict):
        raise TypeError("[layout] must be a table")

    if "name" in section:
        settings.layout = _expect(section["name"], (str,), "layout.name")
    if "anchor" in section:
        settings.anchor = _expect(section["anchor"], (str,), "layout.anchor")
    if "seed" in section:
        settings.seed = _expect(section["seed"], (int,), "layout.seed")
    if "iterations" in section:
        settings.iterations = _expect(section["iterations"], (int,), "layout.iterations")
    if "columns" in section:
        settings.columns = _expect(section["columns"], (int,), "layout.columns")
    if "direction" in section:
        settings.direction = _expect(section["direction"], (str,), "layout.direction").upper()
    if "tolerance" in section:
        settings.tolerance = float(_expect(section["tolerance"], (int, float), "layout.tolerance"))

    spacing = section.get("spacing", {})
    if not isinstance(spacing, dict):
        raise TypeError("[layout.spacing] must be a table")
    settings.spacing = _parse_spacing(spacing)
    return settings


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from ``path`` (default ``./dotlayout.toml``).

    Returns:
        Settings from the file, or defaults when the file doesn't exist or
        is invalid.
    """
    settings_file = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILE)
    if not settings_file.exists():
        logger.debug("No settings file at %s, using defaults", settings_file)
        return Settings()

    try:
        with open(settings_file, "rb") as f:
            data = tomllib.load(f)
        settings = parse_settings(data)
    except (OSError, tomllib.TOMLDecodeError, TypeError, ValueError) as exc:
        logger.warning("Ignoring invalid settings file %s: %s", settings_file, exc)
        return Settings()

    logger.debug("Loaded settings from %s", settings_file)
    return settings
