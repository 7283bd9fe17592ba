"""
Formatter plumbing shared by every output format.

A formatter is a callable taking a FormatContext and returning the text of
one artifact. Formatters are collected in a FormatterRegistry value that the
builder receives at construction time.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import cached_property

from swatch.core.errors import UnknownFormatterError
from swatch.core.ir.config import FormatOptions, OutputFile
from swatch.core.ir.tokens import (
    CompositeList,
    CompositeMap,
    Scalar,
    TokenNode,
    TokenTree,
    TokenValue,
    scalar_text,
    value_to_raw,
)
from swatch.core.references import REFERENCE_PATTERN, normalize_target

DO_NOT_EDIT = "Do not edit directly, this file was auto-generated."
TIMESTAMP_PREFIX = "Generated on "


@dataclass
class FormatContext:
    """
    Everything a formatter may look at.

    Attributes:
        tokens: Tokens visible to this file (filtered), in tree order
        all_tokens: The platform's complete transformed tree
        file: Output file declaration
        platform: Platform name
        theme: Theme name, or None for the shared unit
        now: Clock used for opt-in header timestamps
    """

    tokens: list[TokenNode]
    all_tokens: TokenTree
    file: OutputFile
    platform: str = ""
    theme: str | None = None
    now: datetime | None = None

    @property
    def options(self) -> FormatOptions:
        return self.file.options

    @cached_property
    def visible(self) -> dict[str, TokenNode]:
        return {node.dotted: node for node in self.tokens}


Formatter = Callable[[FormatContext], str]


class FormatterRegistry:
    """Named formatters available to output files."""

    def __init__(self, formatters: Mapping[str, Formatter] | None = None):
        self._formatters: dict[str, Formatter] = dict(formatters or {})

    def register(self, name: str, formatter: Formatter) -> None:
        self._formatters[name] = formatter

    def has(self, name: str) -> bool:
        return name in self._formatters

    def names(self) -> list[str]:
        return sorted(self._formatters)

    def get(self, name: str) -> Formatter:
        try:
            return self._formatters[name]
        except KeyError:
            raise UnknownFormatterError(
                f"Unknown formatter '{name}'. Available: {', '.join(self.names())}"
            ) from None

    def render(self, name: str, context: FormatContext) -> str:
        """Run a formatter; the artifact always ends with a newline."""
        text = self.get(name)(context)
        return text if text.endswith("\n") else text + "\n"


# =============================================================================
# Helpers
# =============================================================================


def file_header(context: FormatContext) -> str:
    """
    Build the comment header of a generated file.

    The optional timestamp sits on its own line so it can be stripped
    before diffing (see ``strip_timestamp``).
    """
    options = context.options
    if not options.show_file_header:
        return ""
    fmt = options.file_header

    lines = [DO_NOT_EDIT]
    if options.file_header_timestamp:
        now = context.now or datetime.now(timezone.utc)
        lines.append(f"{TIMESTAMP_PREFIX}{now.strftime('%a, %d %b %Y %H:%M:%S GMT')}")

    body = fmt.line_separator.join(f"{fmt.prefix}{line}" for line in lines)
    return f"{fmt.header}{body}{fmt.footer}\n\n"


_TIMESTAMP_LINE = re.compile(rf"^.*{re.escape(TIMESTAMP_PREFIX)}.*GMT\n", re.MULTILINE)


def strip_timestamp(text: str) -> str:
    """Remove the generated-on header line, leaving everything else intact."""
    return _TIMESTAMP_LINE.sub("", text, count=1)


def render_value(value: TokenValue) -> str:
    """Render a value as a stylesheet literal."""
    match value:
        case Scalar(v):
            return scalar_text(v)
        case CompositeList(items):
            return ", ".join(render_value(item) for item in items)
        case CompositeMap():
            return json.dumps(value_to_raw(value), separators=(",", ":"))
    raise TypeError(f"not a token value: {value!r}")


def reference_value(
    node: TokenNode, context: FormatContext, style: Callable[[TokenNode], str]
) -> str | None:
    """
    Render a token's authored references instead of its resolved value.

    Only used with ``output_references``. Every referenced token must be
    visible in the same file, otherwise the resolved literal is kept so the
    artifact never points at a variable it does not define.
    """
    if not context.options.output_references:
        return None
    raw = node.raw_value
    if not (isinstance(raw, Scalar) and isinstance(raw.value, str)):
        return None
    targets = [normalize_target(m.group(1)) for m in REFERENCE_PATTERN.finditer(raw.value)]
    if not targets or any(t not in context.visible for t in targets):
        return None
    return REFERENCE_PATTERN.sub(
        lambda m: style(context.visible[normalize_target(m.group(1))]), raw.value
    ).strip()


def comment_text(comment: str) -> str:
    """Make a comment safe to embed in a block comment."""
    return " ".join(comment.replace("*/", "* /").split())
