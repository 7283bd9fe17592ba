"""
Swatch output formats.

Built-in formatters:

- css/variables: flat custom property sheet
- scss/mixin: custom properties inside a reusable mixin
- scss/custom-properties: ``$name: --name;`` name declarations
- scss/variables: ``$name: value;`` literals
- scss/map-deep: literals plus a nested lookup map
- json: structured dump of names, types, values and comments
"""

from .base import (
    FormatContext,
    Formatter,
    FormatterRegistry,
    file_header,
    render_value,
    strip_timestamp,
)
from .css import format_css_variables, format_scss_mixin
from .json_dump import format_json
from .scss import format_custom_properties, format_map_deep, format_scss_variables

BUILTIN_FORMATTERS: dict[str, Formatter] = {
    "css/variables": format_css_variables,
    "scss/mixin": format_scss_mixin,
    "scss/custom-properties": format_custom_properties,
    "scss/variables": format_scss_variables,
    "scss/map-deep": format_map_deep,
    "json": format_json,
}


def default_formatters() -> FormatterRegistry:
    """Create a registry holding the built-in formatters."""
    return FormatterRegistry(BUILTIN_FORMATTERS)


__all__ = [
    "BUILTIN_FORMATTERS",
    "FormatContext",
    "Formatter",
    "FormatterRegistry",
    "default_formatters",
    "file_header",
    "render_value",
    "strip_timestamp",
]
