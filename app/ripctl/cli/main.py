"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from ripctl import __version__
from ripctl.cli.commands import bury, config, decompose, seance, unbury

# Create main Typer app
app = typer.Typer(
    name="ripctl",
    help="Reversible rm: bury files in a graveyard and bring them back.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"ripctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    graveyard: Annotated[
        Path | None,
        typer.Option(
            "--graveyard",
            help="Directory where buried files rest.",
        ),
    ] = None,
) -> None:
    """ripctl - reversible deletion.

    Buried files are moved into a graveyard that mirrors their original
    location, and can be restored with unbury.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["graveyard"] = graveyard


# Register commands
app.command(name="bury")(bury.bury)
app.command(name="unbury")(unbury.unbury)
app.command(name="seance")(seance.seance)
app.command(name="decompose")(decompose.decompose)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
