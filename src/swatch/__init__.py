"""
Swatch - design-token build engine.

Compiles declarative token trees into theme-specific stylesheets and data
files: merge token files, resolve references, compose themes, filter and
format.
"""

from __future__ import annotations

from ._version import __version__
from .core.builder import Builder, BuildReport
from .core.errors import (
    BuildError,
    ConfigError,
    CyclicReferenceError,
    LoadError,
    NameCollisionError,
    ResolutionError,
    SwatchError,
    UnknownFilterError,
    UnknownFormatterError,
    UnresolvedReferenceError,
)

__all__ = [
    "__version__",
    "Builder",
    "BuildReport",
    "SwatchError",
    "ConfigError",
    "LoadError",
    "NameCollisionError",
    "ResolutionError",
    "CyclicReferenceError",
    "UnresolvedReferenceError",
    "UnknownFormatterError",
    "UnknownFilterError",
    "BuildError",
]
