"""
Swatch CLI Utilities.

Shared helpers used across CLI modules.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console

from swatch._version import __version__
from swatch.core.builder import Builder
from swatch.core.errors import BuildError, SwatchError
from swatch.core.manifest import MANIFEST_FILE

console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"Swatch version {__version__}")
        typer.echo("")
        typer.echo("Environment:")
        python = f"{platform.python_implementation()} {platform.python_version()}"
        typer.echo(f"  Python:        {python}")
        typer.echo(f"  Platform:      {platform.system()} {platform.release()}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def manifest_option() -> Path:
    return typer.Option(  # type: ignore[no-any-return]
        Path(MANIFEST_FILE),
        "--manifest",
        "-m",
        help="Path to swatch.toml",
    )


def load_builder(manifest: Path) -> Builder:
    """Create a Builder from a manifest, exiting with code 1 on configuration errors."""
    try:
        return Builder.from_manifest(manifest.resolve())
    except SwatchError as e:
        report_error(e)
        raise typer.Exit(code=1) from e


def report_error(error: SwatchError) -> None:
    """Print an error as ``<unit>: <ErrorKind>: <message>`` lines."""
    if isinstance(error, BuildError):
        err_console.print(f"[red]Build failed[/red] ({len(error.failures)} unit(s))")
        for unit, failure in error.failures.items():
            err_console.print(f"  [bold]{unit}[/bold]: {failure.kind}: {failure}", highlight=False)
    else:
        err_console.print(f"[red]{error.kind}[/red]: {error}", highlight=False)
