"""
Swatch inspection commands.

- tokens: list a theme's resolved tokens, or explain one token's alias chain
- formats: list registered formatters, filters and transform groups
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.table import Table

from swatch.core.errors import SwatchError
from swatch.core.ir.tokens import TokenValue, value_to_raw
from swatch.core.resolver import resolve_reference_chain, resolve_tree
from swatch.core.transforms import attribute_cti

from .utils import configure_logging, console, load_builder, manifest_option, report_error


def _display(value: TokenValue) -> str:
    raw = value_to_raw(value)
    return raw if isinstance(raw, str) else json.dumps(raw)


def tokens_command(
    manifest: Path = manifest_option(),  # noqa: B008
    theme: str | None = typer.Option(
        None,
        "--theme",
        "-t",
        help="Theme to show (default: the shared tree)",
    ),
    filter_name: str | None = typer.Option(
        None,
        "--filter",
        "-f",
        help="Only show tokens passing a named filter",
    ),
    raw: bool = typer.Option(False, "--raw", help="Show values before reference resolution"),
    explain: str | None = typer.Option(
        None,
        "--explain",
        help="Print the alias chain of one token path",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Show the composed token tree of a theme.
    """
    configure_logging(verbose)
    builder = load_builder(manifest)

    try:
        tree = builder.load_theme(theme, resolve=not raw and explain is None)
        if explain is not None:
            if explain not in tree:
                console.print(f"[red]No token '{explain}'[/red]")
                raise typer.Exit(code=1)
            chain = resolve_reference_chain(tree, explain)
            resolved = resolve_tree(tree)
            console.print(" -> ".join(chain), highlight=False)
            console.print(f"= {_display(resolved[explain].value)}", highlight=False)
            return
        predicate = builder.filters.predicate(filter_name)
        # Filters read classification attributes
        attributed = tree.map(lambda node: node.evolve(attributes=attribute_cti(node)))
    except SwatchError as e:
        report_error(e)
        raise typer.Exit(code=1) from e

    table = Table(title=f"Tokens ({theme or 'shared'})")
    table.add_column("Path", style="cyan")
    table.add_column("Type")
    table.add_column("Value")
    table.add_column("Source", style="dim")

    for node in attributed:
        if not predicate(node):
            continue
        source = node.source.name if node.source else "-"
        table.add_row(node.dotted, node.type or "-", _display(node.value), source)
    console.print(table)


def formats_command() -> None:
    """List built-in formatters, filters and transform groups."""
    from swatch.core.filters import default_filters
    from swatch.core.transforms import default_transforms
    from swatch.formats import default_formatters

    sections = (
        ("Formatters", default_formatters().names()),
        ("Filters", default_filters().names()),
        ("Transform groups", default_transforms().group_names()),
    )
    for title, names in sections:
        console.print(f"[bold]{title}[/bold]")
        for name in names:
            console.print(f"  {name}", highlight=False)
