"""
Build configuration IR types.

Defines the structure of swatch.toml: the declared themes, how source files
are selected, and the platforms built once per theme and once for the shared,
theme-independent token set.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_INCLUDE = ["**/*.json", "**/*.yaml", "**/*.yml"]


class CollisionPolicy(StrEnum):
    """What the loader does when two files define the same token path."""

    WARN = "warn"
    ERROR = "error"


# =============================================================================
# Output files
# =============================================================================


class FileHeaderFormatting(BaseModel):
    """Comment delimiters used for generated file headers."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    header: str = Field(default="/**\n", description="Text opening the header comment")
    prefix: str = Field(default=" * ", description="Prefix of every header line")
    footer: str = Field(default="\n */", description="Text closing the header comment")
    line_separator: str = "\n"


class FormatOptions(BaseModel):
    """Per-file options handed to formatters."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_references: bool = Field(
        default=False,
        description="Emit aliases as references to the target variable instead of literals",
    )
    themeable: bool | None = Field(
        default=None,
        description="Append !default to SCSS declarations (formatter decides when unset)",
    )
    show_comments: bool = True
    show_file_header: bool = True
    file_header_timestamp: bool = Field(
        default=False,
        description="Add a 'Generated on' line to the header (breaks byte-stable output)",
    )
    file_header: FileHeaderFormatting = Field(default_factory=FileHeaderFormatting)
    selector: str = ":root"
    mixin_name: str = "tokens"
    map_name: str = "tokens"
    indentation: str = "  "


class OutputFile(BaseModel):
    """One artifact rendered by a platform."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    destination: str = Field(
        description="File name relative to the platform build path; "
        "may contain {theme} and {suffix} placeholders",
    )
    format: str = Field(description="Name of a registered formatter")
    filter: str | list[str] | Callable[..., bool] | None = Field(
        default=None,
        description="Filter name, list of filter names, or a predicate",
    )
    options: FormatOptions = Field(default_factory=FormatOptions)

    @field_validator("destination")
    @classmethod
    def _relative_destination(cls, v: str) -> str:
        if not v or v.startswith("/"):
            raise ValueError(f"destination must be a relative file name, got {v!r}")
        return v

    def destination_for(self, theme: str | None) -> str:
        """Expand placeholders for a theme (``None`` for the shared unit)."""
        suffix = f".{theme}" if theme else ""
        return self.destination.replace("{theme}", theme or "").replace("{suffix}", suffix)


class PlatformConfig(BaseModel):
    """An output target: transform group, build path and files."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    transform_group: str = "css"
    build_path: str = ""
    prefix: str | None = Field(default=None, description="Prefix prepended to output names")
    files: list[OutputFile] = Field(default_factory=list)


# =============================================================================
# Build
# =============================================================================


class BuildConfig(BaseModel):
    """Complete static build declaration."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = "tokens"
    source_dir: str = "tokens"
    include: list[str] = Field(default_factory=lambda: list(DEFAULT_INCLUDE))
    themes: list[str] = Field(default_factory=list)
    reference_theme: str | None = Field(
        default=None,
        description="Theme whose fragment completes the shared token set "
        "(defaults to the first declared theme)",
    )
    on_collision: CollisionPolicy = CollisionPolicy.WARN
    platforms: dict[str, PlatformConfig] = Field(
        default_factory=dict, description="Platforms built once per theme"
    )
    shared: dict[str, PlatformConfig] = Field(
        default_factory=dict, description="Platforms built once for all themes"
    )

    @field_validator("themes")
    @classmethod
    def _valid_theme_names(cls, v: list[str]) -> list[str]:
        seen: set[str] = set()
        for theme in v:
            if not theme or "." in theme or "/" in theme:
                raise ValueError(f"invalid theme name {theme!r}")
            if theme in seen:
                raise ValueError(f"theme {theme!r} declared twice")
            seen.add(theme)
        return v

    @model_validator(mode="after")
    def _reference_theme_declared(self) -> BuildConfig:
        if self.reference_theme is not None and self.reference_theme not in self.themes:
            raise ValueError(
                f"reference_theme {self.reference_theme!r} is not one of {self.themes}"
            )
        return self

    @property
    def shared_theme(self) -> str | None:
        """Theme fragment merged into the shared unit."""
        if self.reference_theme:
            return self.reference_theme
        return self.themes[0] if self.themes else None
