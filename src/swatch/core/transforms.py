"""
Platform transforms.

A transform group is an ordered list of named transforms applied to every
resolved token before a platform's files are filtered and formatted:

- attribute transforms derive the classification map filters look at
- name transforms derive the output name (``color-text-primary``)
- value transforms render values for the target language (``1rem``)

Registries are plain values built by ``default_transforms()``; callers that
need extra transforms build their own registry instead of mutating a global.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from .errors import ConfigError, NameCollisionError, UnknownTransformGroupError
from .ir.tokens import (
    CompositeList,
    CompositeMap,
    Scalar,
    TokenNode,
    TokenTree,
    TokenValue,
    scalar_text,
)


class TransformKind(StrEnum):
    ATTRIBUTE = "attribute"
    NAME = "name"
    VALUE = "value"


@dataclass(frozen=True)
class Transform:
    """A named token transform.

    ``apply`` receives the token and the platform name prefix and returns an
    attribute dict, a name, or a new TokenValue depending on ``kind``.
    """

    name: str
    kind: TransformKind
    apply: Callable[[TokenNode, str | None], Any]
    matcher: Callable[[TokenNode], bool] | None = None

    def matches(self, node: TokenNode) -> bool:
        return self.matcher is None or self.matcher(node)


class TransformRegistry:
    """Named transforms and the transform groups built from them."""

    def __init__(self) -> None:
        self._transforms: dict[str, Transform] = {}
        self._groups: dict[str, tuple[Transform, ...]] = {}

    def register(self, transform: Transform) -> None:
        self._transforms[transform.name] = transform

    def register_group(self, name: str, transform_names: Iterable[str]) -> None:
        missing = [t for t in transform_names if t not in self._transforms]
        if missing:
            raise ConfigError(f"Transform group '{name}' uses unknown transforms: {missing}")
        self._groups[name] = tuple(self._transforms[t] for t in transform_names)

    def has_group(self, name: str) -> bool:
        return name in self._groups

    def group_names(self) -> list[str]:
        return sorted(self._groups)

    def group(self, name: str) -> tuple[Transform, ...]:
        try:
            return self._groups[name]
        except KeyError:
            raise UnknownTransformGroupError(
                f"Unknown transform group '{name}'. Available: {', '.join(self.group_names())}"
            ) from None

    def apply_group(self, name: str, tree: TokenTree, prefix: str | None = None) -> TokenTree:
        """Apply every transform of a group to every token of a tree."""
        transforms = self.group(name)
        result = tree.map(lambda node: _apply_all(transforms, node, prefix))

        seen: dict[str, str] = {}
        for node in result:
            if node.name in seen:
                raise NameCollisionError(node.name, seen[node.name], node.dotted, name)
            seen[node.name] = node.dotted
        return result


def _apply_all(
    transforms: tuple[Transform, ...], node: TokenNode, prefix: str | None
) -> TokenNode:
    for transform in transforms:
        if not transform.matches(node):
            continue
        result = transform.apply(node, prefix)
        if transform.kind == TransformKind.ATTRIBUTE:
            node = node.evolve(attributes={**node.attributes, **result})
        elif transform.kind == TransformKind.NAME:
            node = node.evolve(name=result)
        else:
            node = node.evolve(value=result)
    return node


# =============================================================================
# Attribute transforms
# =============================================================================

CTI_KEYS = ("category", "type", "item", "subitem", "state")


def attribute_cti(node: TokenNode, prefix: str | None = None) -> dict[str, str]:
    """Category/Type/Item classification from the token path.

    ``color.base.black`` -> ``{category: color, type: base, item: black}``
    """
    return dict(zip(CTI_KEYS, node.path))


# =============================================================================
# Name transforms
# =============================================================================


def _words(parts: Iterable[str]) -> list[str]:
    words: list[str] = []
    for part in parts:
        spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", part)
        words.extend(re.findall(r"[A-Za-z0-9]+", spaced))
    return words


def _name_parts(node: TokenNode, prefix: str | None) -> list[str]:
    return ([prefix] if prefix else []) + list(node.path)


def name_kebab(node: TokenNode, prefix: str | None = None) -> str:
    return "-".join(w.lower() for w in _words(_name_parts(node, prefix)))


def name_camel(node: TokenNode, prefix: str | None = None) -> str:
    words = [w.lower() for w in _words(_name_parts(node, prefix))]
    if not words:
        return ""
    return words[0] + "".join(w.capitalize() for w in words[1:])


def name_pascal(node: TokenNode, prefix: str | None = None) -> str:
    return "".join(w.lower().capitalize() for w in _words(_name_parts(node, prefix)))


# =============================================================================
# Value transforms
# =============================================================================

_HEX = re.compile(r"^#([0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_UNITLESS = re.compile(r"^-?\d+(\.\d+)?$")


def _is_type(*types: str) -> Callable[[TokenNode], bool]:
    return lambda node: node.type in types


def _hex_channels(value: str) -> tuple[int, int, int, float] | None:
    match = _HEX.match(value.strip())
    if not match:
        return None
    digits = match.group(1)
    if len(digits) in (3, 4):
        digits = "".join(c * 2 for c in digits)
    r, g, b = (int(digits[i : i + 2], 16) for i in (0, 2, 4))
    alpha = int(digits[6:8], 16) / 255 if len(digits) == 8 else 1.0
    return r, g, b, alpha


def color_css(node: TokenNode, prefix: str | None = None) -> TokenValue:
    """Hex colors: opaque -> lowercase hex, translucent -> rgba()."""
    value = node.value
    if not (isinstance(value, Scalar) and isinstance(value.value, str)):
        return value
    channels = _hex_channels(value.value)
    if channels is None:
        return value
    r, g, b, alpha = channels
    if alpha >= 1:
        return Scalar(f"#{r:02x}{g:02x}{b:02x}")
    return Scalar(f"rgba({r}, {g}, {b}, {scalar_text(round(alpha, 2))})")


def color_hex(node: TokenNode, prefix: str | None = None) -> TokenValue:
    """Hex colors normalized to lowercase six (or eight) digit form."""
    value = node.value
    if not (isinstance(value, Scalar) and isinstance(value.value, str)):
        return value
    channels = _hex_channels(value.value)
    if channels is None:
        return value
    r, g, b, alpha = channels
    if alpha >= 1:
        return Scalar(f"#{r:02x}{g:02x}{b:02x}")
    return Scalar(f"#{r:02x}{g:02x}{b:02x}{round(alpha * 255):02x}")


def size_rem(node: TokenNode, prefix: str | None = None) -> TokenValue:
    """Unitless dimensions are rem values: ``0.833`` -> ``0.833rem``."""
    value = node.value
    if not isinstance(value, Scalar) or isinstance(value.value, bool):
        return value
    raw = value.value
    if isinstance(raw, (int, float)):
        return Scalar(f"{scalar_text(raw)}rem")
    if isinstance(raw, str) and _UNITLESS.match(raw.strip()):
        return Scalar(f"{raw.strip()}rem")
    return value


def _quote_family(family: str) -> str:
    family = family.strip()
    if " " in family and not family.startswith(("'", '"')):
        return f"'{family}'"
    return family


def font_family_css(node: TokenNode, prefix: str | None = None) -> TokenValue:
    """Font stacks as a CSS list, quoting family names that contain spaces."""
    value = node.value
    match value:
        case Scalar(str() as stack):
            families = [f for f in stack.split(",") if f.strip()]
        case CompositeList(items) if all(isinstance(i, Scalar) for i in items):
            families = [scalar_text(i.value) for i in items]  # type: ignore[union-attr]
        case _:
            return value
    return Scalar(", ".join(_quote_family(f) for f in families))


def _shadow_layer(layer: TokenValue) -> str:
    if isinstance(layer, Scalar):
        return scalar_text(layer.value)
    assert isinstance(layer, CompositeMap)
    fields = layer.fields

    def part(key: str, default: str = "0") -> str:
        item = fields.get(key)
        return scalar_text(item.value) if isinstance(item, Scalar) else default

    pieces = [part("offsetX"), part("offsetY"), part("blur"), part("spread"), part("color", "")]
    inset = fields.get("inset")
    if isinstance(inset, Scalar) and inset.value is True:
        pieces.insert(0, "inset")
    return " ".join(p for p in pieces if p)


def shadow_css_shorthand(node: TokenNode, prefix: str | None = None) -> TokenValue:
    """Shadow layers as a CSS box-shadow shorthand."""
    value = node.value
    match value:
        case CompositeList(items) if all(
            isinstance(layer, (CompositeMap, Scalar)) for layer in items
        ):
            return Scalar(", ".join(_shadow_layer(layer) for layer in items))
        case CompositeMap():
            return Scalar(_shadow_layer(value))
    return value


# =============================================================================
# Defaults
# =============================================================================

BUILTIN_TRANSFORMS = [
    Transform("attribute/cti", TransformKind.ATTRIBUTE, attribute_cti),
    Transform("name/kebab", TransformKind.NAME, name_kebab),
    Transform("name/camel", TransformKind.NAME, name_camel),
    Transform("name/pascal", TransformKind.NAME, name_pascal),
    Transform("size/rem", TransformKind.VALUE, size_rem, _is_type("dimension", "fontSize")),
    Transform("color/css", TransformKind.VALUE, color_css, _is_type("color")),
    Transform("color/hex", TransformKind.VALUE, color_hex, _is_type("color")),
    Transform("fontFamily/css", TransformKind.VALUE, font_family_css, _is_type("fontFamily")),
    Transform(
        "shadow/css/shorthand", TransformKind.VALUE, shadow_css_shorthand, _is_type("shadow")
    ),
]

_CSS_GROUP = [
    "attribute/cti",
    "name/kebab",
    "size/rem",
    "color/css",
    "fontFamily/css",
    "shadow/css/shorthand",
]

BUILTIN_GROUPS: dict[str, list[str]] = {
    "css": _CSS_GROUP,
    "scss": _CSS_GROUP,
    "js": ["attribute/cti", "name/pascal", "size/rem", "color/hex"],
}


def default_transforms() -> TransformRegistry:
    """Create a registry holding the built-in transforms and groups."""
    registry = TransformRegistry()
    for transform in BUILTIN_TRANSFORMS:
        registry.register(transform)
    for name, transform_names in BUILTIN_GROUPS.items():
        registry.register_group(name, transform_names)
    return registry
