"""CLI commands for ripctl.

This package contains all subcommand implementations.
"""

from ripctl.cli.commands import bury, config, decompose, seance, unbury

__all__ = ["bury", "config", "decompose", "seance", "unbury"]
