"""
Build orchestrator.

Drives the pipeline for every build unit:

    discover files -> load -> compose -> resolve -> transform (per platform)
    -> filter (per file) -> format (per file) -> stage -> commit

One unit per declared theme plus one shared unit. Units run concurrently as
asyncio tasks; each owns its trees, so nothing is shared between them. All
artifacts are rendered before anything is written: if any unit fails, the
build raises BuildError and no file is touched.

Usage::

    from swatch.core.builder import Builder

    report = Builder.from_manifest(Path("swatch.toml")).build()
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from swatch.formats import FormatContext, FormatterRegistry, default_formatters, strip_timestamp

from .composer import compose, compose_shared
from .errors import BuildError, ConfigError, SwatchError
from .fileset import TokenFileSet, discover_token_files
from .filters import FilterRegistry, apply_filter, default_filters
from .ir.config import BuildConfig, OutputFile, PlatformConfig
from .ir.tokens import TokenTree
from .loader import load_tree
from .manifest import load_manifest
from .resolver import resolve_tree
from .transforms import TransformRegistry, default_transforms

logger = logging.getLogger(__name__)

SHARED_UNIT = "shared"
DEFAULT_UNIT = "default"


@dataclass(frozen=True)
class BuildUnit:
    """
    One pass through the pipeline.

    Attributes:
        name: Unit name used in reports ("light", "dark", "shared")
        theme: Theme used to expand destinations and selectors (None when shared)
        fragment: Theme whose fragment is overlaid on the shared files
        platforms: Platforms rendered from the unit's tree
    """

    name: str
    theme: str | None
    fragment: str | None
    platforms: Mapping[str, PlatformConfig]


@dataclass
class Artifact:
    """A rendered file waiting to be committed."""

    unit: str
    platform: str
    path: Path
    content: str


@dataclass
class BuildReport:
    """Outcome of a successful build."""

    units: list[str] = field(default_factory=list)
    artifacts: list[Artifact] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    unchanged: list[Path] = field(default_factory=list)


class Builder:
    """
    Builds every declared artifact of a project.

    Formatter, filter and transform registries are passed in explicitly
    (defaults otherwise). The configuration is validated against them on
    construction, before any file is read.

    Raises:
        ConfigError: (or a subclass) for unknown formatters, filters or
            transform groups, and for duplicate destinations
    """

    def __init__(
        self,
        config: BuildConfig,
        root: Path,
        *,
        formatters: FormatterRegistry | None = None,
        filters: FilterRegistry | None = None,
        transforms: TransformRegistry | None = None,
        now: datetime | None = None,
    ):
        self.config = config
        self.root = root
        self.formatters = formatters or default_formatters()
        self.filters = filters or default_filters()
        self.transforms = transforms or default_transforms()
        self.now = now
        self.validate()

    @classmethod
    def from_manifest(cls, manifest_path: Path, **kwargs: object) -> Builder:
        """Create a builder from a swatch.toml; the project root is its directory."""
        config = load_manifest(manifest_path)
        return cls(config, manifest_path.parent, **kwargs)  # type: ignore[arg-type]

    # -------------------------------------------------------------------------
    # Planning
    # -------------------------------------------------------------------------

    def units(self) -> list[BuildUnit]:
        """Build units in declaration order, shared unit last."""
        config = self.config
        units: list[BuildUnit] = []
        if config.platforms:
            if config.themes:
                units.extend(
                    BuildUnit(theme, theme, theme, config.platforms) for theme in config.themes
                )
            else:
                units.append(BuildUnit(DEFAULT_UNIT, None, None, config.platforms))
        if config.shared:
            units.append(BuildUnit(SHARED_UNIT, None, config.shared_theme, config.shared))
        return units

    def destination(self, platform: PlatformConfig, file: OutputFile, theme: str | None) -> Path:
        return self.root / platform.build_path / file.destination_for(theme)

    def validate(self) -> None:
        """Check the configuration against the registries. Touches no files."""
        if SHARED_UNIT in self.config.themes and self.config.shared:
            raise ConfigError(
                f"'{SHARED_UNIT}' is reserved for the shared unit and cannot be a theme"
            )

        for platforms in (self.config.platforms, self.config.shared):
            for platform in platforms.values():
                self.transforms.group(platform.transform_group)
                for file in platform.files:
                    self.formatters.get(file.format)
                    self.filters.predicate(file.filter)

        seen: dict[Path, str] = {}
        for unit in self.units():
            for platform_name, platform in unit.platforms.items():
                for file in platform.files:
                    path = self.destination(platform, file, unit.theme)
                    owner = f"{unit.name}/{platform_name}"
                    if path in seen:
                        raise ConfigError(
                            f"Destination {path} is written by both {seen[path]} and {owner}; "
                            f"use {{suffix}} or {{theme}} in per-theme destinations"
                        )
                    seen[path] = owner

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def discover(self) -> TokenFileSet:
        config = self.config
        return discover_token_files(self.root / config.source_dir, config.include, config.themes)

    def load_unit(
        self, unit: BuildUnit, fileset: TokenFileSet, *, resolve: bool = True
    ) -> TokenTree:
        """Load, compose and (optionally) resolve one unit's tree."""
        policy = self.config.on_collision
        base = load_tree(fileset.shared, policy)
        fragments: dict[str, TokenTree] = {}
        if unit.fragment:
            fragments[unit.fragment] = load_tree(fileset.for_theme(unit.fragment), policy)
        if unit.theme is None:
            composed = compose_shared(base, fragments, unit.fragment)
        else:
            composed = compose(base, fragments[unit.theme])
        return resolve_tree(composed) if resolve else composed

    def load_theme(self, theme: str | None, *, resolve: bool = True) -> TokenTree:
        """Tree for a theme (or the shared tree when ``theme`` is None)."""
        if theme is not None and theme not in self.config.themes:
            raise ConfigError(
                f"Unknown theme '{theme}'. Declared: {', '.join(self.config.themes)}"
            )
        fragment = theme if theme is not None else self.config.shared_theme
        unit = BuildUnit(theme or SHARED_UNIT, theme, fragment, {})
        return self.load_unit(unit, self.discover(), resolve=resolve)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def render_unit(self, unit: BuildUnit, resolved: TokenTree) -> list[Artifact]:
        """Transform, filter and format a resolved tree for every platform of a unit."""
        artifacts: list[Artifact] = []
        for platform_name, platform in unit.platforms.items():
            transformed = self.transforms.apply_group(
                platform.transform_group, resolved, platform.prefix
            )
            for file in platform.files:
                tokens = apply_filter(self.filters.predicate(file.filter), transformed)
                context = FormatContext(
                    tokens=tokens,
                    all_tokens=transformed,
                    file=file,
                    platform=platform_name,
                    theme=unit.theme,
                    now=self.now,
                )
                path = self.destination(platform, file, unit.theme)
                artifacts.append(
                    Artifact(
                        unit=unit.name,
                        platform=platform_name,
                        path=path,
                        content=self.formatters.render(file.format, context),
                    )
                )
                logger.debug("Rendered %s (%d tokens)", path, len(tokens))
        return artifacts

    async def _build_unit(self, unit: BuildUnit, fileset: TokenFileSet) -> list[Artifact]:
        logger.info("Building %s (%d platform(s))", unit.name, len(unit.platforms))
        resolved = await asyncio.to_thread(self.load_unit, unit, fileset)
        return self.render_unit(unit, resolved)

    async def render_async(self) -> tuple[list[str], list[Artifact]]:
        """
        Render every unit without writing anything.

        Returns:
            Unit names and the staged artifacts

        Raises:
            BuildError: If any unit failed; lists every failed unit
        """
        fileset = await asyncio.to_thread(self.discover)
        units = self.units()
        results = await asyncio.gather(
            *(self._build_unit(unit, fileset) for unit in units), return_exceptions=True
        )

        failures: dict[str, SwatchError] = {}
        artifacts: list[Artifact] = []
        for unit, result in zip(units, results):
            if isinstance(result, SwatchError):
                logger.error("Build unit %s failed: %s: %s", unit.name, result.kind, result)
                failures[unit.name] = result
            elif isinstance(result, BaseException):
                raise result
            else:
                artifacts.extend(result)

        if failures:
            raise BuildError(failures)
        return [unit.name for unit in units], artifacts

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    async def build_async(self) -> BuildReport:
        """Render all units, then commit every artifact."""
        unit_names, artifacts = await self.render_async()
        changed = await asyncio.gather(*(asyncio.to_thread(write_artifact, a) for a in artifacts))

        report = BuildReport(units=unit_names, artifacts=artifacts)
        for artifact, was_written in zip(artifacts, changed):
            (report.written if was_written else report.unchanged).append(artifact.path)
        logger.info(
            "Build complete: %d written, %d unchanged", len(report.written), len(report.unchanged)
        )
        return report

    def build(self) -> BuildReport:
        return asyncio.run(self.build_async())

    async def check_async(self) -> list[Artifact]:
        """Artifacts whose file on disk is missing or differs (timestamps ignored)."""
        _, artifacts = await self.render_async()
        return [a for a in artifacts if not artifact_is_current(a)]

    def check(self) -> list[Artifact]:
        return asyncio.run(self.check_async())


def write_artifact(artifact: Artifact) -> bool:
    """
    Replace an artifact's file with its content.

    The content goes to a temporary sibling first and is moved into place,
    so readers never see a half-written file.

    Returns:
        False when the file already held exactly this content
    """
    path = artifact.path
    if path.exists() and path.read_text(encoding="utf-8") == artifact.content:
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_text(artifact.content, encoding="utf-8", newline="\n")
    os.replace(tmp, path)
    logger.debug("Wrote %s", path)
    return True


def artifact_is_current(artifact: Artifact) -> bool:
    if not artifact.path.exists():
        return False
    on_disk = artifact.path.read_text(encoding="utf-8")
    return strip_timestamp(on_disk) == strip_timestamp(artifact.content)
