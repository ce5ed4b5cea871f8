"""Decompose command for erasing the graveyard.

This module provides the `ripctl decompose` command, which permanently
deletes the graveyard and its record.
"""

from typing import Annotated

import typer

from ripctl.cli.types import get_operator
from ripctl.core.config import ConfigError
from ripctl.graveyard.errors import RipError
from ripctl.utils.formatting import print_error, print_info, print_success


def decompose(
    ctx: typer.Context,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt.",
        ),
    ] = False,
) -> None:
    """Permanently delete the graveyard. This cannot be undone."""
    try:
        operator = get_operator(ctx, assume_yes=yes)
        removed = operator.decompose()
    except (ConfigError, RuntimeError, RipError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if removed:
        print_success(f"Graveyard {operator.graveyard} decomposed.")
    else:
        print_info("Cancelled.")
