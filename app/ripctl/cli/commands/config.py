"""Configuration commands.

Provides commands to show the effective settings and to write a
default config file.
"""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from ripctl.cli.types import get_graveyard
from ripctl.core.config import ConfigError, RipConfig, load_config, save_config
from ripctl.core.paths import get_config_path
from ripctl.utils.formatting import console, format_size, print_error, print_info, print_success

app = typer.Typer(
    help="Show or initialize ripctl settings.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Show the effective settings."""
    config_path = get_config_path()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    table = Table(
        title="Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", no_wrap=True)
    table.add_column("Value")

    source = "" if config_path.exists() else " [muted](not found)[/muted]"
    table.add_row("config file", f"{escape(str(config_path))}{source}")
    table.add_row("graveyard", escape(str(get_graveyard(ctx, config))))
    threshold = config.big_file_threshold
    table.add_row("big_file_threshold", f"{threshold} ({format_size(threshold)})")
    table.add_row("inspect", str(config.inspect).lower())

    console.print(table)


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_info(f"Config already exists at {config_path} (use --force to overwrite).")
        return

    try:
        saved = save_config(RipConfig(), config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote default config to {saved}")
