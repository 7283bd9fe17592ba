"""
Structured JSON dump of the filtered token tree, for tooling and docs.
"""

from __future__ import annotations

import json
from typing import Any

from swatch.core.ir.tokens import TokenNode, value_to_raw

from .base import FormatContext


def token_entry(node: TokenNode) -> dict[str, Any]:
    entry: dict[str, Any] = {"name": node.name}
    if node.type is not None:
        entry["type"] = node.type
    entry["value"] = value_to_raw(node.value)
    if node.comment:
        entry["comment"] = node.comment
    entry["attributes"] = dict(node.attributes)
    entry["path"] = list(node.path)
    entry["original"] = {"value": value_to_raw(node.raw_value)}
    return entry


def format_json(context: FormatContext) -> str:
    root: dict[str, Any] = {}
    for node in context.tokens:
        current = root
        for part in node.path[:-1]:
            current = current.setdefault(part, {})
        current[node.path[-1]] = token_entry(node)
    return json.dumps(root, indent=2, ensure_ascii=False) + "\n"
