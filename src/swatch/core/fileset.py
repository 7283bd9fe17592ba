"""
Token file discovery.

Selects token files under the source directory and splits them into the
theme-independent set and one fragment per declared theme.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class TokenFileSet:
    """Selected token files split into the shared set and per-theme fragments."""

    shared: list[Path] = field(default_factory=list)
    themed: dict[str, list[Path]] = field(default_factory=dict)

    def for_theme(self, theme: str) -> list[Path]:
        return self.themed.get(theme, [])


def theme_tag(path: Path, themes: list[str]) -> str | None:
    """Return the declared theme a file belongs to, if any.

    ``theme.dark.json`` is tagged ``dark`` when ``dark`` is declared; files
    tagged with an undeclared name are treated as theme-independent.
    """
    parts = path.name.split(".")
    if len(parts) >= 3 and parts[-2] in themes:
        return parts[-2]
    return None


def discover_token_files(source_dir: Path, include: list[str], themes: list[str]) -> TokenFileSet:
    files: set[Path] = set()
    if source_dir.is_dir():
        for pattern in include:
            files.update(p for p in source_dir.glob(pattern) if p.is_file())

    fileset = TokenFileSet(themed={theme: [] for theme in themes})
    for p in sorted(files, key=lambda p: p.relative_to(source_dir).as_posix()):
        tag = theme_tag(p, themes)
        if tag is None:
            fileset.shared.append(p)
        else:
            fileset.themed[tag].append(p)
    return fileset
