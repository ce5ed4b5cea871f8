"""Unbury command for restoring buried targets.

This module provides the `ripctl unbury` command, which moves graves
back to where they were buried from.
"""

from pathlib import Path
from typing import Annotated

import typer

from ripctl.cli.display import print_exhume_results
from ripctl.cli.types import get_operator
from ripctl.core.config import ConfigError
from ripctl.graveyard.errors import RipError
from ripctl.utils.formatting import print_error, print_info


def unbury(
    ctx: typer.Context,
    selectors: Annotated[
        list[Path] | None,
        typer.Argument(help="Grave paths or original paths to restore."),
    ] = None,
    seance: Annotated[
        bool,
        typer.Option(
            "--seance",
            "-s",
            help="Also restore everything buried from the current directory.",
        ),
    ] = False,
) -> None:
    """Restore buried files, or the last buried file if none are given.

    If something now occupies the original location, the restored file
    is placed beside it with a ~N suffix instead of replacing it.

    Examples:
        ripctl unbury                     # Restore the last burial
        ripctl unbury notes.txt           # Restore by original path
        ripctl unbury -s                  # Restore everything from here
    """
    try:
        operator = get_operator(ctx)
        results = operator.unbury(selectors or [], seance=seance)
    except (ConfigError, RuntimeError, RipError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not results:
        print_info("Nothing to unbury.")
        return

    print_exhume_results(results)

    if any(not r.success for r in results):
        raise typer.Exit(code=1)
