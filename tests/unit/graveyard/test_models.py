"""Unit tests for graveyard models."""

import os
import stat
from pathlib import Path

import pytest
from ripctl.graveyard.models import (
    EntryKind,
    ExhumeResult,
    GraveRecordEntry,
    MoveOutcome,
)


def _fake_stat(mode: int, size: int = 0) -> os.stat_result:
    return os.stat_result((mode, 0, 0, 0, 0, 0, size, 0, 0, 0))


class TestEntryKind:
    """Tests for EntryKind classification."""

    @pytest.mark.parametrize(
        ("mode", "expected"),
        [
            (stat.S_IFREG | 0o644, EntryKind.REGULAR),
            (stat.S_IFDIR | 0o755, EntryKind.DIRECTORY),
            (stat.S_IFLNK | 0o777, EntryKind.SYMLINK),
            (stat.S_IFIFO | 0o600, EntryKind.FIFO),
            (stat.S_IFSOCK | 0o755, EntryKind.OTHER),
            (stat.S_IFCHR | 0o666, EntryKind.OTHER),
        ],
    )
    def test_from_stat(self, mode: int, expected: EntryKind) -> None:
        """Each file type maps to its kind."""
        assert EntryKind.from_stat(_fake_stat(mode)) == expected

    def test_symlink_to_directory_is_symlink(self, tmp_path: Path) -> None:
        """A link to a directory is classified by lstat, not by its target."""
        (tmp_path / "dir").mkdir()
        link = tmp_path / "link"
        link.symlink_to(tmp_path / "dir")
        assert EntryKind.from_stat(os.lstat(link)) == EntryKind.SYMLINK


class TestGraveRecordEntry:
    """Tests for GraveRecordEntry validation."""

    def test_absolute_paths_accepted(self) -> None:
        """Entries hold two absolute paths."""
        entry = GraveRecordEntry(original=Path("/a/b"), grave=Path("/g/a/b"))
        assert entry.original == Path("/a/b")
        assert entry.grave == Path("/g/a/b")

    def test_relative_original_rejected(self) -> None:
        """A relative original path is invalid."""
        with pytest.raises(ValueError, match="Original path must be absolute"):
            GraveRecordEntry(original=Path("a/b"), grave=Path("/g/a/b"))

    def test_relative_grave_rejected(self) -> None:
        """A relative grave path is invalid."""
        with pytest.raises(ValueError, match="Grave path must be absolute"):
            GraveRecordEntry(original=Path("/a/b"), grave=Path("g/a/b"))

    def test_entries_are_hashable(self) -> None:
        """Equal entries collapse in a set."""
        a = GraveRecordEntry(original=Path("/a"), grave=Path("/g/a"))
        b = GraveRecordEntry(original=Path("/a"), grave=Path("/g/a"))
        assert {a, b} == {a}


class TestExhumeResult:
    """Tests for ExhumeResult."""

    def test_success_without_error(self) -> None:
        """A result without an error is a success."""
        entry = GraveRecordEntry(original=Path("/a"), grave=Path("/g/a"))
        result = ExhumeResult(entry=entry, restored_to=Path("/a"), outcome=MoveOutcome.RENAMED)
        assert result.success is True

    def test_failure_with_error(self) -> None:
        """A result with an error is a failure."""
        entry = GraveRecordEntry(original=Path("/a"), grave=Path("/g/a"))
        result = ExhumeResult(entry=entry, error="boom")
        assert result.success is False
        assert result.stale is False
