"""
Swatch CLI Package.

- build.py: build and drift-check commands
- tokens.py: token and registry inspection commands
- utils.py: shared utilities
"""

import typer

from swatch.cli.build import build_command
from swatch.cli.tokens import formats_command, tokens_command
from swatch.cli.utils import version_callback

app = typer.Typer(
    help="Swatch - design-token build engine",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
) -> None:
    """Swatch CLI main callback for global options."""
    pass


app.command(name="build")(build_command)
app.command(name="tokens")(tokens_command)
app.command(name="formats")(formats_command)


def main() -> None:
    app()


__all__ = ["app", "main"]
