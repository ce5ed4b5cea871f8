"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from ripctl.graveyard.operator import GraveyardOperator


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path):
    """Keep tests away from the real config directory and graveyard."""
    with patch.dict(
        os.environ,
        {"XDG_CONFIG_HOME": str(tmp_path / "xdg-config")},
    ):
        os.environ.pop("RIP_GRAVEYARD", None)
        os.environ.pop("XDG_DATA_HOME", None)
        yield


@pytest.fixture
def graveyard(tmp_path: Path) -> Path:
    """Graveyard root (not created yet)."""
    return tmp_path.resolve() / "graveyard"


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """Directory holding files to bury."""
    path = tmp_path.resolve() / "data"
    path.mkdir()
    return path


@pytest.fixture
def always_yes() -> Callable[[str], bool]:
    """Confirmation stand-in answering yes."""
    return lambda _prompt: True


@pytest.fixture
def always_no() -> Callable[[str], bool]:
    """Confirmation stand-in answering no."""
    return lambda _prompt: False


@pytest.fixture
def make_operator(
    graveyard: Path, workdir: Path
) -> Callable[..., GraveyardOperator]:
    """Factory for operators bound to the test graveyard and workdir."""

    def _make(confirm: Callable[[str], bool] = lambda _prompt: False, **kwargs) -> GraveyardOperator:
        graveyard.mkdir(exist_ok=True)
        kwargs.setdefault("cwd", workdir)
        return GraveyardOperator(graveyard, confirm, **kwargs)

    return _make
