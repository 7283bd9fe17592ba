"""
Error types for Swatch token loading, resolution, configuration and builds.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class SwatchError(Exception):
    """Base exception for all Swatch errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}: {self.message}"
        return self.message

    @property
    def kind(self) -> str:
        """Error kind as shown to users (the exception class name)."""
        return type(self).__name__


# =============================================================================
# Configuration-time errors (raised before any file I/O)
# =============================================================================


class ConfigError(SwatchError):
    """
    Raised when the build configuration is invalid.

    Examples:
    - Missing or unparsable swatch.toml
    - Schema violations (unknown keys, wrong types)
    - Two output files writing to the same destination
    """

    pass


class UnknownFormatterError(ConfigError):
    """Raised when an output file names a formatter that is not registered."""

    pass


class UnknownFilterError(ConfigError):
    """Raised when an output file names a filter that is not registered."""

    pass


class UnknownTransformGroupError(ConfigError):
    """Raised when a platform names a transform group that is not registered."""

    pass


# =============================================================================
# Load-time errors
# =============================================================================


class LoadError(SwatchError):
    """
    Raised when a token source file cannot be loaded.

    Examples:
    - Invalid JSON/YAML syntax
    - A scalar where a group or token object was expected
    - A token that contains nested tokens
    - A path collision when collisions are configured as errors
    """

    pass


# =============================================================================
# Resolution-time errors
# =============================================================================


class ResolutionError(SwatchError):
    """Base class for reference resolution failures."""

    pass


class CyclicReferenceError(ResolutionError):
    """Raised when tokens reference each other in a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Circular reference detected: {' -> '.join(cycle)}")


class UnresolvedReferenceError(ResolutionError):
    """Raised when a token references a path that does not exist."""

    def __init__(self, path: str, target: str, context: Optional["ErrorContext"] = None):
        self.path = path
        self.target = target
        super().__init__(
            f"Token '{path}' references '{{{target}}}', which does not exist", context
        )


class ReferenceInterpolationError(ResolutionError):
    """Raised when a composite value is referenced from inside a larger string."""

    def __init__(self, path: str, target: str, context: Optional["ErrorContext"] = None):
        self.path = path
        self.target = target
        super().__init__(
            f"Token '{path}' embeds '{{{target}}}' in a string, "
            f"but '{target}' has a composite value",
            context,
        )


# =============================================================================
# Transform-time errors
# =============================================================================


class NameCollisionError(SwatchError):
    """Raised when a name transform gives two tokens the same output name."""

    def __init__(self, name: str, first: str, second: str, group: str):
        self.name = name
        self.paths = (first, second)
        super().__init__(
            f"Tokens '{first}' and '{second}' both get the name '{name}' "
            f"in transform group '{group}'"
        )


# =============================================================================
# Build errors
# =============================================================================


class BuildError(SwatchError):
    """
    Raised when one or more build units failed.

    Carries every unit failure so callers can report all of them. When this
    is raised, no artifact of the invocation has been written.
    """

    def __init__(self, failures: dict[str, SwatchError]):
        self.failures = failures
        lines = [f"{len(failures)} build unit(s) failed:"]
        for unit, error in failures.items():
            lines.append(f"  {unit}: {error.kind}: {error}")
        super().__init__("\n".join(lines))


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        file: Token source file where the error originated
        path: Dot-path of the offending token or group
    """

    file: Path | None = None
    path: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "tokens/color/base.json at color.base"
        """
        parts = []
        if self.file is not None:
            parts.append(str(self.file))
        if self.path:
            parts.append(f"at {self.path}")
        return " ".join(parts)


def make_load_error(message: str, file: Path, path: str | None = None) -> LoadError:
    """
    Helper to create a LoadError with context.

    Args:
        message: Error description
        file: Token source file
        path: Optional dot-path inside the file

    Returns:
        LoadError with context attached
    """
    return LoadError(message, ErrorContext(file=file, path=path))
