"""CLI package for ripctl.

This package contains the Typer application and all subcommands.
"""

from ripctl.cli.main import app

__all__ = ["app"]
