"""
SCSS formats.

- scss/custom-properties: ``$name: --name;`` so hand-written SCSS can refer
  to a token by name while the value comes from the theme mixin or sheet
- scss/variables: ``$name: value;`` literals
- scss/map-deep: literals plus a nested ``$tokens`` lookup map
"""

from __future__ import annotations

from typing import Any

from swatch.core.ir.tokens import TokenNode

from .base import FormatContext, comment_text, file_header, reference_value, render_value


def format_custom_properties(context: FormatContext) -> str:
    lines = [f"${node.name}: --{node.name};" for node in context.tokens]
    return file_header(context) + "\n".join(lines) + "\n"


def _variable_lines(context: FormatContext, themeable: bool) -> list[str]:
    suffix = " !default" if themeable else ""
    lines: list[str] = []
    for node in context.tokens:
        value = reference_value(node, context, lambda ref: f"${ref.name}")
        if value is None:
            value = render_value(node.value)
        line = f"${node.name}: {value}{suffix};"
        if context.options.show_comments and node.comment:
            line += f" // {comment_text(node.comment)}"
        lines.append(line)
    return lines


def format_scss_variables(context: FormatContext) -> str:
    themeable = bool(context.options.themeable)
    return file_header(context) + "\n".join(_variable_lines(context, themeable)) + "\n"


def _nest(tokens: list[TokenNode]) -> dict[str, Any]:
    """Arrange tokens by path: nested dicts with TokenNode leaves."""
    root: dict[str, Any] = {}
    for node in tokens:
        current = root
        for part in node.path[:-1]:
            current = current.setdefault(part, {})
        current[node.path[-1]] = node
    return root


def _map_lines(tree: dict[str, Any], depth: int, indent: str) -> list[str]:
    lines: list[str] = []
    pad = indent * depth
    entries = list(tree.items())
    for i, (key, child) in enumerate(entries):
        comma = "," if i < len(entries) - 1 else ""
        if isinstance(child, TokenNode):
            lines.append(f"{pad}'{key}': ${child.name}{comma}")
        else:
            lines.append(f"{pad}'{key}': (")
            lines.extend(_map_lines(child, depth + 1, indent))
            lines.append(f"{pad}){comma}")
    return lines


def format_map_deep(context: FormatContext) -> str:
    """
    Variables followed by a nested map keyed by token path.

    Declarations are themeable (``!default``) unless the file turns it off.
    """
    options = context.options
    themeable = True if options.themeable is None else options.themeable

    lines = _variable_lines(context, themeable)
    lines.append("")
    nested = _nest(context.tokens)
    if nested:
        lines.append(f"${options.map_name}: (")
        lines.extend(_map_lines(nested, 1, options.indentation))
        lines.append(");")
    else:
        lines.append(f"${options.map_name}: ();")
    return file_header(context) + "\n".join(lines) + "\n"
