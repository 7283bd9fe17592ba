"""
Swatch build commands.

- build: render every artifact and write the changed ones
- build --check: render without writing, fail when anything is out of date
"""

from __future__ import annotations

from pathlib import Path

import typer

from swatch.core.errors import SwatchError

from .utils import configure_logging, console, load_builder, manifest_option, report_error


def build_command(
    manifest: Path = manifest_option(),  # noqa: B008
    check: bool = typer.Option(
        False,
        "--check",
        help="Do not write; exit 1 if any artifact is missing or out of date",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Build token artifacts for every theme and the shared platforms.
    """
    configure_logging(verbose)
    builder = load_builder(manifest)

    if check:
        try:
            stale = builder.check()
        except SwatchError as e:
            report_error(e)
            raise typer.Exit(code=1) from e
        if stale:
            console.print(f"[yellow]{len(stale)} artifact(s) out of date:[/yellow]")
            for artifact in stale:
                console.print(f"  {artifact.unit}: {artifact.path}", highlight=False)
            raise typer.Exit(code=1)
        console.print("[green]All artifacts up to date[/green]")
        return

    try:
        report = builder.build()
    except SwatchError as e:
        report_error(e)
        raise typer.Exit(code=1) from e

    for path in report.written:
        console.print(f"  [green]wrote[/green] {path}", highlight=False)
    console.print(
        f"Built {len(report.units)} unit(s): "
        f"{len(report.written)} written, {len(report.unchanged)} unchanged"
    )
