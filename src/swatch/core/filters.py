"""
Token filters.

A filter is a pure predicate over a transformed token; it decides whether the
token is visible to one output file. Output files name a filter, list several
(all must pass), or pass a predicate directly.

Built-in filters:
- no-base-colors: drop palette colors (category=color, type=base) that only
  exist to be referenced by theme colors
- no-internals: drop tokens under ``internal`` that only drive generated
  utilities
- public: both of the above
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .errors import UnknownFilterError
from .ir.tokens import TokenNode, TokenTree

TokenFilter = Callable[[TokenNode], bool]

FilterSpec = str | list[str] | Callable[..., bool] | None


def is_base_color(node: TokenNode) -> bool:
    return node.attributes.get("category") == "color" and node.attributes.get("type") == "base"


def is_internal(node: TokenNode) -> bool:
    return node.attributes.get("category") == "internal"


def no_base_colors(node: TokenNode) -> bool:
    return not is_base_color(node)


def no_internals(node: TokenNode) -> bool:
    return not is_internal(node)


def public(node: TokenNode) -> bool:
    return no_base_colors(node) and no_internals(node)


def _accept_all(node: TokenNode) -> bool:
    return True


class FilterRegistry:
    """Named filters available to output files."""

    def __init__(self, filters: Mapping[str, TokenFilter] | None = None):
        self._filters: dict[str, TokenFilter] = dict(filters or {})

    def register(self, name: str, predicate: TokenFilter) -> None:
        self._filters[name] = predicate

    def names(self) -> list[str]:
        return sorted(self._filters)

    def get(self, name: str) -> TokenFilter:
        try:
            return self._filters[name]
        except KeyError:
            raise UnknownFilterError(
                f"Unknown filter '{name}'. Available: {', '.join(self.names())}"
            ) from None

    def predicate(self, spec: FilterSpec) -> TokenFilter:
        """Turn an output file's filter declaration into one predicate.

        Raises:
            UnknownFilterError: If a named filter is not registered.
        """
        if spec is None:
            return _accept_all
        if isinstance(spec, str):
            return self.get(spec)
        if isinstance(spec, list):
            predicates = [self.get(name) for name in spec]
            return lambda node: all(p(node) for p in predicates)
        if callable(spec):
            return spec
        raise UnknownFilterError(f"Invalid filter declaration: {spec!r}")


def apply_filter(predicate: Callable[[TokenNode], Any], tree: TokenTree) -> list[TokenNode]:
    """Tokens of ``tree`` accepted by ``predicate``, in tree order."""
    return [node for node in tree if predicate(node)]


def default_filters() -> FilterRegistry:
    """Create a registry holding the built-in filters."""
    return FilterRegistry(
        {
            "no-base-colors": no_base_colors,
            "no-internals": no_internals,
            "public": public,
        }
    )
