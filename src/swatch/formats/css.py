"""
CSS custom property formats.

Generates custom property declarations from resolved tokens:

- css/variables: a flat sheet, ``:root { --name: value; }``
- scss/mixin: the same declarations wrapped in ``@mixin tokens { ... }``
  so stylesheets can apply a theme inside any selector
"""

from __future__ import annotations

from .base import FormatContext, comment_text, file_header, reference_value, render_value


def formatted_declarations(context: FormatContext, indent: str) -> list[str]:
    """
    Generate one custom property declaration per visible token.

    Args:
        context: Format context
        indent: Prefix for every line

    Returns:
        List of declaration lines
    """
    lines: list[str] = []
    for node in context.tokens:
        value = reference_value(node, context, lambda ref: f"var(--{ref.name})")
        if value is None:
            value = render_value(node.value)
        line = f"{indent}--{node.name}: {value};"
        if context.options.show_comments and node.comment:
            line += f" /* {comment_text(node.comment)} */"
        lines.append(line)
    return lines


def _selector(context: FormatContext) -> str:
    """Selector for the sheet; ``{theme}`` expands to the unit's theme name."""
    return context.options.selector.replace("{theme}", context.theme or "")


def format_css_variables(context: FormatContext) -> str:
    options = context.options
    lines = [f"{_selector(context)} {{"]
    lines.extend(formatted_declarations(context, options.indentation))
    lines.append("}")
    return file_header(context) + "\n".join(lines) + "\n"


def format_scss_mixin(context: FormatContext) -> str:
    options = context.options
    lines = [f"@mixin {options.mixin_name} {{"]
    lines.extend(formatted_declarations(context, options.indentation))
    lines.append("}")
    return file_header(context) + "\n".join(lines) + "\n"
