"""
Reference parsing.

A reference is ``{dot.path}`` inside a string value. Parsing references out
of raw values is kept separate from resolving them: ``collect_references``
builds the edge list of a tree once, and the resolver only walks edges.
"""

from __future__ import annotations

import re

from .ir.tokens import CompositeList, CompositeMap, Scalar, TokenTree, TokenValue

REFERENCE_PATTERN = re.compile(r"\{([^{}]+)\}")

# Accepted for compatibility with {color.base.black.value} style references
_VALUE_SUFFIXES = (".$value", ".value")


def normalize_target(target: str) -> str:
    """Strip whitespace and an explicit value suffix from a reference target."""
    target = target.strip()
    for suffix in _VALUE_SUFFIXES:
        if target.endswith(suffix):
            return target[: -len(suffix)]
    return target


def alias_target(value: TokenValue) -> str | None:
    """Return the target when the whole value is a single reference."""
    if isinstance(value, Scalar) and isinstance(value.value, str):
        match = REFERENCE_PATTERN.fullmatch(value.value.strip())
        if match:
            return normalize_target(match.group(1))
    return None


def find_references(value: TokenValue) -> list[str]:
    """List reference targets in a value, in order of first appearance."""
    found: dict[str, None] = {}
    _collect(value, found)
    return list(found)


def _collect(value: TokenValue, found: dict[str, None]) -> None:
    match value:
        case Scalar(str() as text):
            for m in REFERENCE_PATTERN.finditer(text):
                found.setdefault(normalize_target(m.group(1)), None)
        case Scalar():
            pass
        case CompositeList(items):
            for item in items:
                _collect(item, found)
        case CompositeMap(fields):
            for item in fields.values():
                _collect(item, found)


def collect_references(tree: TokenTree) -> dict[str, list[str]]:
    """Build the reference edge list: token path -> referenced paths.

    Every token of the tree appears as a key, with an empty list when it
    holds no references.
    """
    return {node.dotted: find_references(node.value) for node in tree}
