"""Shared helpers for CLI commands.

This module builds the GraveyardOperator every command works with,
from the global options, the environment and the config file.
"""

from pathlib import Path

import typer

from ripctl.core.config import RipConfig, load_config
from ripctl.core.paths import ensure_graveyard, resolve_graveyard
from ripctl.graveyard.operator import GraveyardOperator


def confirm(prompt: str) -> bool:
    """Ask a yes/no question on the terminal, defaulting to no."""
    return typer.confirm(prompt, default=False)


def _always_yes(_prompt: str) -> bool:
    return True


def get_graveyard(ctx: typer.Context, config: RipConfig) -> Path:
    """Resolve the graveyard from the --graveyard option and config."""
    explicit: Path | None = (ctx.obj or {}).get("graveyard")
    return resolve_graveyard(explicit=explicit, configured=config.graveyard)


def get_operator(
    ctx: typer.Context,
    inspect: bool = False,
    assume_yes: bool = False,
) -> GraveyardOperator:
    """Create a GraveyardOperator for the current invocation.

    Creates the graveyard if it does not exist yet.

    Args:
        ctx: Typer context carrying the global options.
        inspect: Summarize and confirm each target before burying.
        assume_yes: Answer yes to every question instead of prompting.

    Returns:
        Operator bound to the resolved graveyard.

    Raises:
        ConfigError: If the config file is invalid.
        RuntimeError: If the graveyard cannot be created.
    """
    config = load_config()
    graveyard = ensure_graveyard(get_graveyard(ctx, config))
    return GraveyardOperator(
        graveyard,
        _always_yes if assume_yes else confirm,
        big_file_threshold=config.big_file_threshold,
        inspect=inspect or config.inspect,
    )
