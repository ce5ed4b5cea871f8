"""Seance command for listing graves.

This module provides the `ripctl seance` command, which lists what
was buried from the current directory.
"""

import json
from typing import Annotated

import typer

from ripctl.cli.display import create_seance_table
from ripctl.cli.types import get_operator
from ripctl.core.config import ConfigError
from ripctl.graveyard.errors import RipError
from ripctl.utils.formatting import console, print_error, print_info


def seance(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List files buried from the current directory."""
    try:
        operator = get_operator(ctx)
        entries = operator.seance()
    except (ConfigError, RuntimeError, RipError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        data = [{"original": str(e.original), "grave": str(e.grave)} for e in entries]
        console.print_json(json.dumps(data))
        return

    if not entries:
        print_info("No graves here.")
        return

    console.print(create_seance_table(entries))
