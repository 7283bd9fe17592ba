"""Tests for token file parsing and merging."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from swatch.core.errors import LoadError
from swatch.core.ir.config import CollisionPolicy
from swatch.core.ir.tokens import CompositeList, CompositeMap, Scalar
from swatch.core.loader import (
    check_structure,
    load_tree,
    merge_token_nodes,
    parse_token_document,
    read_token_document,
)

SOURCE = Path("tokens/test.json")


# =============================================================================
# Parsing
# =============================================================================


class TestParseTokenDocument:
    """Test flattening of nested token documents."""

    def test_tokens_in_document_order(self):
        nodes = parse_token_document(
            {
                "color": {
                    "base": {
                        "black": {"$value": "#000000"},
                        "white": {"$value": "#ffffff"},
                    }
                },
                "radius": {"s": {"$value": "4px"}},
            },
            SOURCE,
        )

        assert [n.dotted for n in nodes] == [
            "color.base.black",
            "color.base.white",
            "radius.s",
        ]
        assert nodes[0].value == Scalar("#000000")
        assert nodes[0].raw_value == nodes[0].value
        assert nodes[0].source == SOURCE

    def test_group_type_is_inherited(self):
        nodes = parse_token_document(
            {
                "size": {
                    "$type": "dimension",
                    "gutter": {"$value": "1.5rem"},
                    "line": {"$type": "number", "single": {"$value": 1.5}},
                }
            },
            SOURCE,
        )

        types = {n.dotted: n.type for n in nodes}
        assert types == {"size.gutter": "dimension", "size.line.single": "number"}

    def test_token_type_overrides_group_type(self):
        nodes = parse_token_document(
            {"size": {"$type": "dimension", "ratio": {"$value": 1.2, "$type": "number"}}},
            SOURCE,
        )
        assert nodes[0].type == "number"

    def test_comment_and_description(self):
        nodes = parse_token_document(
            {
                "size": {
                    "measure": {"$value": "65ch", "comment": "The maximum paragraph width."},
                    "gutter": {"$value": "1.5rem", "$description": "Column gap."},
                }
            },
            SOURCE,
        )
        assert nodes[0].comment == "The maximum paragraph width."
        assert nodes[1].comment == "Column gap."

    def test_composite_values(self):
        nodes = parse_token_document(
            {
                "shadow": {
                    "low": {
                        "$value": [{"color": "#0000000D", "offsetY": "1px"}],
                    }
                },
                "factors": {"$value": [1, 2, 3]},
            },
            SOURCE,
        )

        shadow = nodes[0].value
        assert isinstance(shadow, CompositeList)
        layer = shadow.items[0]
        assert isinstance(layer, CompositeMap)
        assert list(layer.fields) == ["color", "offsetY"]
        assert nodes[1].value == CompositeList((Scalar(1), Scalar(2), Scalar(3)))

    def test_numeric_group_keys(self):
        # YAML parses palette steps as integers
        nodes = parse_token_document({"gray": {0: {"$value": "#f9f9f9"}}}, SOURCE)
        assert nodes[0].path == ("gray", "0")

    def test_top_level_must_be_mapping(self):
        with pytest.raises(LoadError, match="mapping at the top level"):
            parse_token_document(["not", "a", "tree"], SOURCE)

    def test_scalar_where_group_expected(self):
        with pytest.raises(LoadError) as exc_info:
            parse_token_document({"color": {"black": "#000"}}, SOURCE)

        err = exc_info.value
        assert err.context is not None
        assert err.context.file == SOURCE
        assert err.context.path == "color.black"

    def test_token_with_nested_token(self):
        with pytest.raises(LoadError, match="nested tokens"):
            parse_token_document(
                {"color": {"$value": "#000", "dark": {"$value": "#111"}}},
                SOURCE,
            )

    def test_null_value(self):
        with pytest.raises(LoadError, match="null"):
            parse_token_document({"color": {"$value": None}}, SOURCE)

    def test_non_string_type(self):
        with pytest.raises(LoadError, match=r"\$type must be a string"):
            parse_token_document({"color": {"$type": 3, "a": {"$value": "#000"}}}, SOURCE)

    @pytest.mark.parametrize("name", ["a.b", "{a}", ""])
    def test_invalid_names(self, name: str):
        with pytest.raises(LoadError, match="Invalid token or group name"):
            parse_token_document({name: {"$value": 1}}, SOURCE)


# =============================================================================
# Reading
# =============================================================================


class TestReadTokenDocument:
    """Test reading JSON and YAML token files."""

    def test_json(self, tmp_path: Path):
        path = tmp_path / "a.json"
        path.write_text('{"a": {"$value": 1}}')
        assert read_token_document(path) == {"a": {"$value": 1}}

    def test_yaml(self, tmp_path: Path):
        path = tmp_path / "a.yaml"
        path.write_text("size:\n  $type: dimension\n  gutter:\n    $value: 1.5rem\n")
        data = read_token_document(path)
        assert data["size"]["gutter"]["$value"] == "1.5rem"

    def test_invalid_json_names_file(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(LoadError, match="Invalid JSON") as exc_info:
            read_token_document(path)
        assert exc_info.value.context.file == path

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "broken.yaml"
        path.write_text("a: [unclosed")
        with pytest.raises(LoadError, match="Invalid YAML"):
            read_token_document(path)

    def test_unsupported_suffix(self, tmp_path: Path):
        path = tmp_path / "tokens.txt"
        path.write_text("{}")
        with pytest.raises(LoadError, match="Unsupported"):
            read_token_document(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(LoadError, match="Cannot read"):
            read_token_document(tmp_path / "missing.json")

    def test_undecodable_file_names_file(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_bytes(b'{"a": {"$value": "\xff"}}')

        with pytest.raises(LoadError, match="Cannot read") as exc_info:
            read_token_document(path)
        assert exc_info.value.context.file == path


# =============================================================================
# Merging
# =============================================================================


class TestMerge:
    """Test merging documents into one tree."""

    def test_later_file_wins_whole_node(self, write_tokens):
        first = write_tokens(
            "a.json",
            {"color": {"primary": {"$value": "#111111", "$type": "color", "comment": "old"}}},
        )
        second = write_tokens("b.json", {"color": {"primary": {"$value": "#222222"}}})

        tree = load_tree([first, second])

        node = tree["color.primary"]
        assert node.value == Scalar("#222222")
        # No merging of sibling attributes
        assert node.type is None
        assert node.comment is None
        assert node.source == second

    def test_replaced_node_keeps_first_seen_position(self, write_tokens):
        first = write_tokens("a.json", {"a": {"$value": 1}, "b": {"$value": 2}})
        second = write_tokens("b.json", {"a": {"$value": 3}})

        tree = load_tree([first, second])
        assert tree.paths() == ["a", "b"]

    def test_collision_is_logged(self, write_tokens, caplog):
        first = write_tokens("a.json", {"a": {"$value": 1}})
        second = write_tokens("b.json", {"a": {"$value": 2}})

        with caplog.at_level(logging.WARNING, logger="swatch.core.loader"):
            load_tree([first, second])

        assert "Token collision" in caplog.text
        assert "a.json" in caplog.text and "b.json" in caplog.text

    def test_collision_error_policy(self, write_tokens):
        first = write_tokens("a.json", {"a": {"$value": 1}})
        second = write_tokens("b.json", {"a": {"$value": 2}})

        with pytest.raises(LoadError, match="already defined"):
            load_tree([first, second], CollisionPolicy.ERROR)

    def test_token_becomes_group_across_files(self, write_tokens):
        first = write_tokens("a.json", {"color": {"$value": "#000"}})
        second = write_tokens("b.json", {"color": {"dark": {"$value": "#111"}}})

        with pytest.raises(LoadError, match="nested under token 'color'"):
            load_tree([first, second])

    def test_group_becomes_token_across_files(self, write_tokens):
        first = write_tokens("a.json", {"color": {"dark": {"$value": "#111"}}})
        second = write_tokens("b.json", {"color": {"$value": "#000"}})

        with pytest.raises(LoadError, match="conflicts with group"):
            load_tree([first, second])

    def test_merge_token_nodes_directly(self):
        a = parse_token_document({"x": {"$value": 1}}, Path("a.json"))
        b = parse_token_document({"y": {"$value": 2}}, Path("b.json"))

        tree = merge_token_nodes([(Path("a.json"), a), (Path("b.json"), b)])
        assert tree.paths() == ["x", "y"]


class TestCheckStructure:
    """Test structural validation of composed trees."""

    def test_nested_token_is_rejected(self, make_tree):
        tree = make_tree({"color": "#000", "color.dark": "#111"})
        with pytest.raises(LoadError, match="nested under token 'color'"):
            check_structure(tree)

    def test_valid_tree(self, make_tree):
        check_structure(make_tree({"color.dark": "#111", "color.light": "#eee"}))
