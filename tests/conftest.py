"""Shared pytest fixtures for Swatch tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from swatch.core.ir.tokens import TokenNode, TokenTree, value_from_raw

DEMO_DIR = Path(__file__).parent.parent / "examples" / "demo"

BASE_COLORS = {
    "color": {
        "$type": "color",
        "base": {
            "black": {"$value": "#000000"},
            "white": {"$value": "#ffffff"},
        },
    }
}


def theme_colors(text: str, background: str) -> dict[str, Any]:
    return {
        "color": {
            "$type": "color",
            "text": {"primary": {"$value": f"{{color.base.{text}}}"}},
            "background": {"primary": {"$value": f"{{color.base.{background}}}"}},
        }
    }


LIGHT_DARK_MANIFEST = """
[project]
name = "fixture"
themes = ["light", "dark"]

[platforms.css]
transform_group = "css"
build_path = "build/css/"
files = [{ destination = "tokens{suffix}.css", format = "css/variables", filter = "no-base-colors" }]

[shared.scss]
transform_group = "scss"
build_path = "build/scss/"
files = [{ destination = "_variables.scss", format = "scss/custom-properties", filter = "public" }]
"""


@pytest.fixture
def demo_dir() -> Path:
    """Return path to the bundled demo project."""
    return DEMO_DIR


@pytest.fixture
def write_tokens(tmp_path: Path) -> Callable[[str, dict[str, Any]], Path]:
    """Return a helper writing a token document below tmp_path/tokens."""

    def _write(relative: str, data: dict[str, Any]) -> Path:
        path = tmp_path / "tokens" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2))
        return path

    return _write


@pytest.fixture
def light_dark_project(tmp_path: Path, write_tokens) -> Path:
    """Create a project with base colors and a light and a dark theme."""
    write_tokens("color/base.json", BASE_COLORS)
    write_tokens("color/theme.light.json", theme_colors("black", "white"))
    write_tokens("color/theme.dark.json", theme_colors("white", "black"))
    (tmp_path / "swatch.toml").write_text(LIGHT_DARK_MANIFEST)
    return tmp_path


@pytest.fixture
def make_tree() -> Callable[..., TokenTree]:
    """Return a helper building a TokenTree from ``{dot.path: raw value}``.

    Values may also be ``(raw value, type)`` tuples.
    """

    def _make(tokens: dict[str, Any]) -> TokenTree:
        nodes = []
        for dotted, spec in tokens.items():
            raw, token_type = spec if isinstance(spec, tuple) else (spec, None)
            value = value_from_raw(raw)
            nodes.append(
                TokenNode(
                    path=tuple(dotted.split(".")),
                    value=value,
                    raw_value=value,
                    type=token_type,
                )
            )
        return TokenTree(nodes)

    return _make
