"""
Token tree loader.

Parses DTCG-style token files (JSON or YAML) into flat lists of TokenNodes
and merges them, in declared order, into one TokenTree per build unit.

File structure::

    {
      "color": {
        "$type": "color",
        "base": {
          "black": {"$value": "#000000", "comment": "Pure black"}
        }
      }
    }

Objects holding ``$value`` are tokens; every other object is a group. A
group's ``$type`` applies to the tokens below it in the same file.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from .errors import make_load_error
from .ir.config import CollisionPolicy
from .ir.tokens import TokenNode, TokenTree, value_from_raw

logger = logging.getLogger(__name__)

# Non-$ keys allowed inside a token object
TOKEN_PROPERTIES = {"comment"}

_FORBIDDEN_NAME_CHARS = set(".{}")


# =============================================================================
# Reading
# =============================================================================


def read_token_document(path: Path) -> Any:
    """Read and parse one token file.

    Raises:
        LoadError: If the file cannot be read or parsed.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise make_load_error(f"Cannot read token file: {e}", path) from e

    suffix = path.suffix.lower()
    try:
        if suffix == ".json":
            return json.loads(content)
        if suffix in (".yaml", ".yml"):
            return yaml.safe_load(content)
    except json.JSONDecodeError as e:
        raise make_load_error(f"Invalid JSON: {e}", path) from e
    except yaml.YAMLError as e:
        raise make_load_error(f"Invalid YAML: {e}", path) from e

    raise make_load_error(f"Unsupported token file type '{suffix}'", path)


# =============================================================================
# Parsing
# =============================================================================


def parse_token_document(data: Any, source: Path) -> list[TokenNode]:
    """Flatten a parsed token document into TokenNodes, in document order.

    Raises:
        LoadError: If the document is not a valid nested token structure.
    """
    if not isinstance(data, dict):
        raise make_load_error(
            f"Token file must contain a mapping at the top level, got {type(data).__name__}",
            source,
        )
    nodes: list[TokenNode] = []
    _walk_group(data, (), None, source, nodes)
    return nodes


def _walk_group(
    group: dict[Any, Any],
    path: tuple[str, ...],
    inherited_type: str | None,
    source: Path,
    out: list[TokenNode],
) -> None:
    group_type = _read_type(group, inherited_type, path, source)

    for key, child in group.items():
        name = str(key)
        if name.startswith("$"):
            continue
        child_path = path + (name,)
        if not name or _FORBIDDEN_NAME_CHARS & set(name):
            raise make_load_error(
                f"Invalid token or group name {name!r}", source, ".".join(child_path)
            )
        if not isinstance(child, dict):
            raise make_load_error(
                f"Expected a group or token object, got {type(child).__name__}",
                source,
                ".".join(child_path),
            )
        if "$value" in child:
            out.append(_parse_token(child, child_path, group_type, source))
        else:
            _walk_group(child, child_path, group_type, source, out)


def _parse_token(
    obj: dict[Any, Any],
    path: tuple[str, ...],
    inherited_type: str | None,
    source: Path,
) -> TokenNode:
    dotted = ".".join(path)

    nested = [str(k) for k in obj if not str(k).startswith("$") and k not in TOKEN_PROPERTIES]
    if nested:
        raise make_load_error(
            f"Token cannot contain nested tokens or groups: {', '.join(nested)}",
            source,
            dotted,
        )

    raw = obj["$value"]
    if raw is None:
        raise make_load_error("Token $value cannot be null", source, dotted)
    try:
        value = value_from_raw(raw)
    except TypeError as e:
        raise make_load_error(f"Invalid token value: {e}", source, dotted) from e

    comment = obj.get("comment", obj.get("$description"))
    if comment is not None and not isinstance(comment, str):
        raise make_load_error("Token comment must be a string", source, dotted)

    return TokenNode(
        path=path,
        value=value,
        raw_value=value,
        type=_read_type(obj, inherited_type, path, source),
        comment=comment,
        source=source,
    )


def _read_type(
    obj: dict[Any, Any], inherited: str | None, path: tuple[str, ...], source: Path
) -> str | None:
    token_type = obj.get("$type", inherited)
    if token_type is not None and not isinstance(token_type, str):
        raise make_load_error("$type must be a string", source, ".".join(path) or None)
    return token_type


# =============================================================================
# Merging
# =============================================================================


def merge_token_nodes(
    documents: Sequence[tuple[Path, list[TokenNode]]],
    on_collision: CollisionPolicy = CollisionPolicy.WARN,
) -> TokenTree:
    """Merge per-file token lists into one tree.

    Documents are merged in the given order; a later token at a path
    replaces the earlier one entirely.

    Raises:
        LoadError: On token/group conflicts, or on path collisions when
            ``on_collision`` is ``error``.
    """
    merged: dict[str, TokenNode] = {}
    # group path -> one token path below it
    groups: dict[str, str] = {}

    for source, nodes in documents:
        for node in nodes:
            dotted = node.dotted
            if dotted in groups:
                raise make_load_error(
                    f"Token '{dotted}' conflicts with group containing '{groups[dotted]}'",
                    source,
                    dotted,
                )
            for i in range(1, len(node.path)):
                prefix = ".".join(node.path[:i])
                if prefix in merged:
                    raise make_load_error(
                        f"Token '{dotted}' is nested under token '{prefix}' "
                        f"defined in {merged[prefix].source}",
                        source,
                        dotted,
                    )
                groups.setdefault(prefix, dotted)

            existing = merged.get(dotted)
            if existing is not None:
                if on_collision == CollisionPolicy.ERROR:
                    raise make_load_error(
                        f"Token '{dotted}' is already defined in {existing.source}",
                        source,
                        dotted,
                    )
                logger.warning(
                    "Token collision: '%s' from %s overrides %s",
                    dotted,
                    source,
                    existing.source,
                )
            merged[dotted] = node

    return TokenTree(merged.values())


def load_tree(
    files: Sequence[Path], on_collision: CollisionPolicy = CollisionPolicy.WARN
) -> TokenTree:
    """Read, parse and merge token files into one TokenTree.

    Args:
        files: Token files in merge order.
        on_collision: What to do when two files define the same token.

    Returns:
        Merged TokenTree.

    Raises:
        LoadError: If any file is malformed or the merge conflicts.
    """
    documents = []
    for path in files:
        logger.debug("Reading token file %s", path)
        documents.append((path, parse_token_document(read_token_document(path), path)))
    return merge_token_nodes(documents, on_collision)


def check_structure(tree: TokenTree) -> None:
    """Ensure no token sits below another token (e.g. after composing trees).

    Raises:
        LoadError: Naming the nested token and the token above it.
    """
    for node in tree:
        for i in range(1, len(node.path)):
            prefix = ".".join(node.path[:i])
            parent = tree.get(prefix)
            if parent is not None:
                raise make_load_error(
                    f"Token '{node.dotted}' is nested under token '{prefix}' "
                    f"defined in {parent.source}",
                    node.source,
                    node.dotted,
                )
