"""Tests for config.py — TOML settings."""

from __future__ import annotations

import logging

import pytest

from dotlayout.config import Settings, load_settings, parse_settings
from dotlayout.layout import LayoutSpacing

FULL_CONFIG = """
[layout]
name = "radial"
anchor = "hub"
seed = 7
iterations = 80
columns = 4
direction = "lr"
tolerance = 0.5

[layout.spacing]
node_spacing = 100
radius_step = 180.5
"""


def write(tmp_path, text: str):
    """Write ``text`` to a settings file and return its path."""
    path = tmp_path / "dotlayout.toml"
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadSettings:
    def test_missing_file(self, tmp_path):
        """No file: defaults."""
        assert load_settings(tmp_path / "absent.toml") == Settings()

    def test_full_file(self, tmp_path):
        """Every key is read."""
        settings = load_settings(write(tmp_path, FULL_CONFIG))
        assert settings.layout == "radial"
        assert settings.anchor == "hub"
        assert settings.seed == 7
        assert settings.iterations == 80
        assert settings.columns == 4
        assert settings.direction == "LR"
        assert settings.tolerance == 0.5
        assert settings.spacing.node_spacing == 100.0
        assert settings.spacing.radius_step == 180.5
        assert settings.spacing.grid_spacing == LayoutSpacing().grid_spacing

    def test_empty_file(self, tmp_path):
        """An empty file is valid and gives defaults."""
        assert load_settings(write(tmp_path, "")) == Settings()

    def test_unknown_keys_ignored(self, tmp_path):
        """Unknown sections and keys are skipped."""
        settings = load_settings(write(tmp_path, "[other]\nx = 1\n[layout]\ncolour = 'red'\nseed = 3\n"))
        assert settings.seed == 3

    def test_malformed_toml(self, tmp_path, caplog):
        """Unreadable TOML: defaults and a warning."""
        path = write(tmp_path, "[layout\nname = ")
        with caplog.at_level(logging.WARNING, logger="dotlayout.config"):
            assert load_settings(path) == Settings()
        assert "Ignoring invalid settings file" in caplog.text

    def test_wrong_type(self, tmp_path, caplog):
        """A value of the wrong type: defaults and a warning."""
        path = write(tmp_path, '[layout]\nseed = "seven"\n')
        with caplog.at_level(logging.WARNING, logger="dotlayout.config"):
            assert load_settings(path) == Settings()
        assert "layout.seed" in caplog.text

    def test_default_path(self, tmp_path, monkeypatch):
        """Without a path, ./dotlayout.toml is read when present."""
        write(tmp_path, '[layout]\nname = "grid"\n')
        monkeypatch.chdir(tmp_path)
        assert load_settings().layout == "grid"


class TestParseSettings:
    def test_bool_is_not_a_number(self):
        """true is rejected where an integer is expected."""
        with pytest.raises(TypeError):
            parse_settings({"layout": {"iterations": True}})

    def test_layout_must_be_table(self):
        """layout = "x" at top level is rejected."""
        with pytest.raises(TypeError):
            parse_settings({"layout": "grid"})


class TestSettings:
    def test_to_params(self):
        """Settings map onto layout parameters."""
        settings = Settings(anchor="A", seed=5, iterations=10, columns=3, direction="LR", tolerance=0.1)
        params = settings.to_params()
        assert params.anchor_id == "A"
        assert params.seed == 5
        assert params.iterations == 10
        assert params.columns == 3
        assert params.direction == "LR"
        assert params.tolerance == 0.1
        assert params.spacing == LayoutSpacing()

    def test_override_skips_none(self):
        """None keywords leave the current value in place."""
        settings = Settings(layout="grid", seed=4).override(layout=None, seed=9, anchor=None)
        assert settings.layout == "grid"
        assert settings.seed == 9
        assert settings.anchor is None
