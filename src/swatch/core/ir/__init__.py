"""
Swatch intermediate representation.

Token values, nodes and trees, plus the pydantic models describing a build.
"""

from .config import (
    DEFAULT_INCLUDE,
    BuildConfig,
    CollisionPolicy,
    FileHeaderFormatting,
    FormatOptions,
    OutputFile,
    PlatformConfig,
)
from .tokens import (
    CompositeList,
    CompositeMap,
    Scalar,
    TokenNode,
    TokenTree,
    TokenValue,
    scalar_text,
    value_from_raw,
    value_to_raw,
)

__all__ = [
    # Values
    "Scalar",
    "CompositeList",
    "CompositeMap",
    "TokenValue",
    "value_from_raw",
    "value_to_raw",
    "scalar_text",
    # Tree
    "TokenNode",
    "TokenTree",
    # Config
    "DEFAULT_INCLUDE",
    "BuildConfig",
    "CollisionPolicy",
    "FileHeaderFormatting",
    "FormatOptions",
    "OutputFile",
    "PlatformConfig",
]
