"""XDG-compliant path management for ripctl.

This module provides standardized paths following the XDG Base Directory
Specification, and resolves where the graveyard lives.

Graveyard resolution order:
1. Explicit path (the --graveyard option)
2. $RIP_GRAVEYARD
3. graveyard setting in ~/.config/ripctl/config.toml
4. $XDG_DATA_HOME/graveyard
5. /tmp/graveyard-<user>
"""

import getpass
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Application identifier for directory naming
APP_NAME = "ripctl"

GRAVEYARD_ENV_VAR = "RIP_GRAVEYARD"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/ripctl/ (or XDG_CONFIG_HOME/ripctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/ripctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def _get_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def default_graveyard() -> Path:
    """Get the graveyard used when nothing else is configured.

    Returns:
        $XDG_DATA_HOME/graveyard if XDG_DATA_HOME is set,
        otherwise /tmp/graveyard-<user>.
    """
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "graveyard"
    return Path(f"/tmp/graveyard-{_get_user()}")


def resolve_graveyard(explicit: Path | None = None, configured: Path | None = None) -> Path:
    """Pick the graveyard location.

    Args:
        explicit: Path passed on the command line, if any.
        configured: Path from the config file, if any.

    Returns:
        Absolute graveyard path (not necessarily existing yet).
    """
    if explicit is not None:
        chosen = explicit
    elif os.environ.get(GRAVEYARD_ENV_VAR):
        chosen = Path(os.environ[GRAVEYARD_ENV_VAR])
    elif configured is not None:
        chosen = configured
    else:
        chosen = default_graveyard()

    chosen = chosen.expanduser().absolute()
    logger.debug("Graveyard set to: %s", chosen)
    return chosen


def _ensure_dir(path: Path, name: str, mode: int = 0o777) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.
        mode: Permission bits for newly created directories.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(mode=mode, parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_graveyard(path: Path) -> Path:
    """Create the graveyard if it doesn't exist.

    A new graveyard is only accessible by its owner (mode 0700).

    Args:
        path: Graveyard root.

    Returns:
        The graveyard path.

    Raises:
        RuntimeError: If the graveyard cannot be created.
    """
    if path.is_dir():
        return path

    logger.debug("Creating graveyard at %s", path)
    _ensure_dir(path, "graveyard", mode=0o700)
    try:
        path.chmod(0o700)
    except OSError as e:
        logger.debug("Could not set permissions on %s: %s", path, e)
    return path
