"""
Token IR types.

A token value is one of three shapes: ``Scalar``, ``CompositeList`` or
``CompositeMap``. Every stage past the loader (resolver, transforms,
formatters) pattern-matches over these shapes instead of probing loosely
typed nested dicts.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Union

# =============================================================================
# Values
# =============================================================================


@dataclass(frozen=True)
class Scalar:
    """A single string, number or boolean value."""

    value: str | int | float | bool


@dataclass(frozen=True)
class CompositeList:
    """An ordered list of values (e.g. shadow layers, font stacks)."""

    items: tuple[TokenValue, ...]


@dataclass(frozen=True)
class CompositeMap:
    """An ordered mapping of field name to value (e.g. one shadow layer)."""

    fields: dict[str, TokenValue]


TokenValue = Union[Scalar, CompositeList, CompositeMap]


def value_from_raw(raw: Any) -> TokenValue:
    """Convert plain parsed data (JSON/YAML) into a typed token value.

    Raises:
        TypeError: If the data contains nulls or unsupported types.
    """
    if isinstance(raw, dict):
        return CompositeMap({str(k): value_from_raw(v) for k, v in raw.items()})
    if isinstance(raw, (list, tuple)):
        return CompositeList(tuple(value_from_raw(v) for v in raw))
    if isinstance(raw, (str, int, float, bool)):
        return Scalar(raw)
    raise TypeError(f"unsupported value {raw!r} of type {type(raw).__name__}")


def value_to_raw(value: TokenValue) -> Any:
    """Convert a typed token value back into plain data."""
    match value:
        case Scalar(v):
            return v
        case CompositeList(items):
            return [value_to_raw(item) for item in items]
        case CompositeMap(fields):
            return {k: value_to_raw(v) for k, v in fields.items()}
    raise TypeError(f"not a token value: {value!r}")


def scalar_text(value: str | int | float | bool) -> str:
    """Render a scalar the way it appears in stylesheets (1.0 -> "1", True -> "true")."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


# =============================================================================
# Nodes
# =============================================================================


@dataclass(frozen=True)
class TokenNode:
    """
    A named design token.

    Attributes:
        path: Position in the tree, one segment per group level
        value: Current value (resolved once the tree went through the resolver)
        raw_value: Value as authored, possibly holding reference strings
        type: DTCG type (color, dimension, fontFamily, shadow, ...)
        comment: Optional documentation carried into artifacts
        attributes: Classification map (category/type/item/...) used by filters
        source: File the token was loaded from
        name: Output name; the dot-path until a name transform replaces it
    """

    path: tuple[str, ...]
    value: TokenValue
    raw_value: TokenValue
    type: str | None = None
    comment: str | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    source: Path | None = None
    name: str = ""

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.dotted)

    @property
    def dotted(self) -> str:
        """Dot-joined path, the key references use."""
        return ".".join(self.path)

    def evolve(self, **changes: Any) -> TokenNode:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


class TokenTree:
    """
    Ordered collection of tokens keyed by dot-path.

    Iteration follows first-seen order of paths; replacing a node keeps its
    original position, which keeps artifact order stable across builds.
    """

    def __init__(self, nodes: Iterable[TokenNode] = ()):
        self._nodes: dict[str, TokenNode] = {}
        for node in nodes:
            self._nodes[node.dotted] = node

    def __getitem__(self, path: str) -> TokenNode:
        return self._nodes[path]

    def __contains__(self, path: object) -> bool:
        return path in self._nodes

    def __iter__(self) -> Iterator[TokenNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenTree):
            return NotImplemented
        return list(self._nodes.items()) == list(other._nodes.items())

    def __repr__(self) -> str:
        return f"TokenTree({len(self._nodes)} tokens)"

    def get(self, path: str) -> TokenNode | None:
        return self._nodes.get(path)

    def paths(self) -> list[str]:
        return list(self._nodes)

    def overlay(self, other: TokenTree) -> TokenTree:
        """Return a new tree where nodes of ``other`` replace nodes at the same path."""
        merged = dict(self._nodes)
        merged.update(other._nodes)
        return TokenTree(merged.values())

    def map(self, fn: Any) -> TokenTree:
        """Return a new tree with ``fn`` applied to every node."""
        return TokenTree(fn(node) for node in self._nodes.values())
