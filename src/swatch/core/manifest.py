"""
Build manifest loading.

Reads swatch.toml from the project root:

    [project]               -> themes, source selection, collision policy
    [platforms.<name>]      -> platforms built once per theme
    [shared.<name>]         -> platforms built once for the shared token set
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .errors import ConfigError
from .ir.config import BuildConfig

logger = logging.getLogger(__name__)

MANIFEST_FILE = "swatch.toml"

_TOP_LEVEL_TABLES = {"project", "platforms", "shared"}


def get_manifest_path(project_root: Path) -> Path:
    """Get the swatch.toml path for a project root."""
    return project_root / MANIFEST_FILE


def parse_manifest_data(data: dict[str, Any], source: Path | None = None) -> BuildConfig:
    """Build a BuildConfig from parsed TOML data.

    Raises:
        ConfigError: On unknown tables or schema violations.
    """
    where = source or MANIFEST_FILE
    unknown = sorted(set(data) - _TOP_LEVEL_TABLES)
    if unknown:
        raise ConfigError(f"Unknown table(s) in {where}: {', '.join(unknown)}")

    project = dict(data.get("project", {}))
    for reserved in ("platforms", "shared"):
        if reserved in project:
            raise ConfigError(f"[project] in {where} cannot define '{reserved}'")

    try:
        return BuildConfig(
            **project,
            platforms=data.get("platforms", {}),
            shared=data.get("shared", {}),
        )
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {where}: {e}") from e


def load_manifest(path: Path) -> BuildConfig:
    """Load and validate a swatch.toml file.

    Args:
        path: Path to swatch.toml.

    Returns:
        Validated BuildConfig.

    Raises:
        ConfigError: If the file is missing, is not valid TOML, or fails validation.
    """
    if not path.exists():
        raise ConfigError(f"No {MANIFEST_FILE} found at {path}")

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    config = parse_manifest_data(data, path)
    logger.debug(
        "Loaded %s: themes=%s, %d theme platform(s), %d shared platform(s)",
        path,
        config.themes,
        len(config.platforms),
        len(config.shared),
    )
    return config
