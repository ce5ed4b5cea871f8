"""Bury command for sending targets to the graveyard.

This module provides the `ripctl bury` command, the reversible
replacement for rm.
"""

from pathlib import Path
from typing import Annotated

import typer

from ripctl.cli.display import create_bury_table
from ripctl.cli.types import get_operator
from ripctl.core.config import ConfigError
from ripctl.graveyard.errors import RipError
from ripctl.graveyard.models import BuryResult
from ripctl.utils.formatting import console, print_error


def bury(
    ctx: typer.Context,
    targets: Annotated[
        list[Path],
        typer.Argument(help="Files or directories to bury."),
    ],
    inspect: Annotated[
        bool,
        typer.Option(
            "--inspect",
            "-i",
            help="Show a summary of each target and ask before burying it.",
        ),
    ] = False,
) -> None:
    """Move files or directories into the graveyard.

    Targets are processed in order and processing stops at the first
    one that fails; targets before it stay buried.

    Examples:
        ripctl bury notes.txt build/
        ripctl bury -i old-project/
    """
    try:
        operator = get_operator(ctx, inspect=inspect)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    results: list[BuryResult] = []
    error: RipError | None = None
    for target in targets:
        try:
            results.append(operator.bury_target(target))
        except RipError as e:
            error = e
            break

    if results:
        console.print(create_bury_table(results))

    if error is not None:
        print_error(str(error))
        raise typer.Exit(code=1)
