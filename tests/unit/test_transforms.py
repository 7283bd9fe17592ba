"""Tests for platform transforms."""

from __future__ import annotations

import pytest

from swatch.core.errors import ConfigError, NameCollisionError, UnknownTransformGroupError
from swatch.core.ir.tokens import CompositeList, Scalar, TokenNode, value_from_raw
from swatch.core.transforms import (
    Transform,
    TransformKind,
    TransformRegistry,
    attribute_cti,
    color_css,
    color_hex,
    default_transforms,
    font_family_css,
    name_camel,
    name_kebab,
    name_pascal,
    shadow_css_shorthand,
    size_rem,
)


def node(path: str, raw, token_type: str | None = None) -> TokenNode:
    value = value_from_raw(raw)
    return TokenNode(path=tuple(path.split(".")), value=value, raw_value=value, type=token_type)


class TestAttributeTransforms:
    def test_cti(self):
        assert attribute_cti(node("color.base.black", "#000")) == {
            "category": "color",
            "type": "base",
            "item": "black",
        }

    def test_cti_deep_path(self):
        attrs = attribute_cti(node("a.b.c.d.e.f", 1))
        assert attrs == {"category": "a", "type": "b", "item": "c", "subitem": "d", "state": "e"}


class TestNameTransforms:
    def test_kebab(self):
        assert name_kebab(node("color.text.primary", "#000")) == "color-text-primary"

    def test_kebab_splits_words(self):
        assert name_kebab(node("size.line.three_quarters", 1)) == "size-line-three-quarters"
        assert name_kebab(node("font.family.mainStack", "x")) == "font-family-main-stack"

    def test_kebab_with_prefix(self):
        assert name_kebab(node("color.text", "#000"), "ds") == "ds-color-text"

    def test_camel(self):
        assert name_camel(node("color.text.primary", "#000")) == "colorTextPrimary"

    def test_pascal(self):
        assert name_pascal(node("color.base.black", "#000")) == "ColorBaseBlack"

    def test_numeric_segments(self):
        assert name_kebab(node("color.gray.100", "#d3d3d3")) == "color-gray-100"


class TestValueTransforms:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("#000000", "#000000"),
            ("#FFF", "#ffffff"),
            ("#0000001A", "rgba(0, 0, 0, 0.1)"),
            ("#ff000080", "rgba(255, 0, 0, 0.5)"),
            ("rebeccapurple", "rebeccapurple"),
        ],
    )
    def test_color_css(self, raw: str, expected: str):
        assert color_css(node("c", raw, "color")) == Scalar(expected)

    def test_color_hex(self):
        assert color_hex(node("c", "#ABC", "color")) == Scalar("#aabbcc")
        assert color_hex(node("c", "#0000001A", "color")) == Scalar("#0000001a")

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (1, "1rem"),
            (1.0, "1rem"),
            ("0.833", "0.833rem"),
            ("1.5rem", "1.5rem"),
            ("769px", "769px"),
            ("65ch", "65ch"),
        ],
    )
    def test_size_rem(self, raw, expected: str):
        assert size_rem(node("size.font.m", raw, "dimension")) == Scalar(expected)

    def test_font_family(self):
        value = font_family_css(node("f", "-apple-system, avenir next, sans-serif", "fontFamily"))
        assert value == Scalar("-apple-system, 'avenir next', sans-serif")

    def test_font_family_list(self):
        value = font_family_css(node("f", ["Helvetica Neue", "Arial"], "fontFamily"))
        assert value == Scalar("'Helvetica Neue', Arial")

    def test_shadow_layers(self):
        layer = {"offsetX": "0px", "blur": "6px", "spread": "-1px"}
        raw = [
            {**layer, "color": "#0000001A", "offsetY": "4px"},
            {**layer, "color": "#0000000F", "offsetY": "2px", "blur": "4px"},
        ]
        value = shadow_css_shorthand(node("shadow.medium", raw, "shadow"))
        assert value == Scalar("0px 4px 6px -1px #0000001A, 0px 2px 4px -1px #0000000F")

    def test_shadow_inset_and_defaults(self):
        raw = {"color": "#000", "offsetY": "1px", "inset": True}
        value = shadow_css_shorthand(node("shadow.inner", raw, "shadow"))
        assert value == Scalar("inset 0 1px 0 0 #000")

    def test_plain_string_passes_through(self):
        assert shadow_css_shorthand(node("shadow.none", "none", "shadow")) == Scalar("none")

    def test_non_shadow_types_are_untouched(self, make_tree):
        tree = make_tree({"internal.factors": [1, 2]})
        result = default_transforms().apply_group("css", tree)
        assert result["internal.factors"].value == CompositeList((Scalar(1), Scalar(2)))


class TestTransformRegistry:
    def test_css_group(self, make_tree):
        tree = make_tree(
            {
                "color.text.primary": ("#FFF", "color"),
                "size.font.m": (1, "dimension"),
                "size.line.single": (1.5, "number"),
            }
        )

        result = default_transforms().apply_group("css", tree)

        primary = result["color.text.primary"]
        assert primary.name == "color-text-primary"
        assert primary.value == Scalar("#ffffff")
        assert primary.attributes["category"] == "color"
        assert result["size.font.m"].value == Scalar("1rem")
        # Only dimensions get units
        assert result["size.line.single"].value == Scalar(1.5)

    def test_js_group(self, make_tree):
        tree = make_tree({"color.text.primary": ("#FFF", "color")})
        result = default_transforms().apply_group("js", tree)
        assert result["color.text.primary"].name == "ColorTextPrimary"

    def test_transforms_keep_raw_value(self, make_tree):
        tree = make_tree({"size.font.m": (1, "dimension")})
        result = default_transforms().apply_group("css", tree)
        assert result["size.font.m"].raw_value == Scalar(1)

    def test_name_collision(self, make_tree):
        tree = make_tree({"a.fontSize": ("1", "dimension"), "a.font_size": ("2", "dimension")})

        with pytest.raises(NameCollisionError, match="'a-font-size'") as exc_info:
            default_transforms().apply_group("css", tree)

        assert exc_info.value.paths == ("a.fontSize", "a.font_size")
        assert "'a.fontSize' and 'a.font_size'" in str(exc_info.value)

    def test_distinct_names_pass(self, make_tree):
        tree = make_tree({"a.fontSize": ("1", "dimension"), "a.font.family": "serif"})
        result = default_transforms().apply_group("js", tree)
        assert [node.name for node in result] == ["AFontSize", "AFontFamily"]

    def test_unknown_group(self):
        with pytest.raises(UnknownTransformGroupError, match="Unknown transform group 'android'"):
            default_transforms().group("android")

    def test_group_with_unknown_transform(self):
        registry = TransformRegistry()
        with pytest.raises(ConfigError, match="unknown transforms"):
            registry.register_group("custom", ["name/kebab"])

    def test_custom_group(self, make_tree):
        registry = TransformRegistry()
        registry.register(
            Transform("name/upper", TransformKind.NAME, lambda n, prefix: n.dotted.upper())
        )
        registry.register_group("upper", ["name/upper"])

        result = registry.apply_group("upper", make_tree({"a.b": 1}))

        assert result["a.b"].name == "A.B"
        assert registry.group_names() == ["upper"]
        assert registry.has_group("upper")
        assert not registry.has_group("css")

    def test_default_groups(self):
        assert default_transforms().group_names() == ["css", "js", "scss"]
