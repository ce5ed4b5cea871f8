"""ripctl configuration and settings.

This module provides the configuration model and I/O functions for
user settings stored in ~/.config/ripctl/config.toml. Every setting is
optional; a missing file means defaults.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ripctl.core.paths import get_config_path
from ripctl.graveyard.mover import BIG_FILE_THRESHOLD


class RipConfig(BaseModel):
    """User configuration for ripctl.

    Attributes:
        graveyard: Graveyard location. None = environment or default.
        big_file_threshold: Files larger than this many bytes ask before
            being copied across filesystems.
        inspect: Always show a summary and ask before burying.
    """

    model_config = ConfigDict(extra="forbid")

    graveyard: Annotated[
        Path | None,
        Field(description="Graveyard location (None = environment or default)"),
    ] = None
    big_file_threshold: Annotated[
        int,
        Field(ge=0, description="Size in bytes above which copies ask first"),
    ] = BIG_FILE_THRESHOLD
    inspect: Annotated[
        bool,
        Field(description="Summarize and confirm each target before burying"),
    ] = False


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> RipConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated RipConfig; defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return RipConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return RipConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: RipConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file first and moved into place
    with os.replace().

    Args:
        config: The RipConfig to save.
        path: Destination. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: RipConfig) -> dict[str, object]:
    """Convert RipConfig to a dictionary for TOML serialization.

    TOML has no null, so an unset graveyard is left out.
    """
    result: dict[str, object] = {
        "big_file_threshold": config.big_file_threshold,
        "inspect": config.inspect,
    }
    if config.graveyard is not None:
        result["graveyard"] = str(config.graveyard)
    return result
