"""Graveyard domain models.

This module defines the record entry stored for every burial, the
closed set of filesystem object kinds the move engine distinguishes,
and the per-target results reported back to the CLI.
"""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EntryKind(str, Enum):
    """Kind of filesystem object, as seen by a link-aware stat.

    Attributes:
        REGULAR: Regular file.
        DIRECTORY: Directory (never a symlink to one).
        SYMLINK: Symbolic link, dangling or not.
        FIFO: Named pipe.
        OTHER: Sockets, device files and anything else.
    """

    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    FIFO = "fifo"
    OTHER = "other"

    @classmethod
    def from_stat(cls, st: os.stat_result) -> EntryKind:
        """Classify an lstat result."""
        mode = st.st_mode
        if stat.S_ISLNK(mode):
            return cls.SYMLINK
        if stat.S_ISDIR(mode):
            return cls.DIRECTORY
        if stat.S_ISREG(mode):
            return cls.REGULAR
        if stat.S_ISFIFO(mode):
            return cls.FIFO
        return cls.OTHER


class MoveOutcome(str, Enum):
    """How a move completed.

    Attributes:
        RENAMED: Atomic same-filesystem rename.
        COPIED: Copy-then-delete fallback.
        DISCARDED: Source was permanently deleted and nothing was created
            at the destination (big-file guard).
    """

    RENAMED = "renamed"
    COPIED = "copied"
    DISCARDED = "discarded"


class BuryStatus(str, Enum):
    """What happened to a single bury target.

    Attributes:
        BURIED: Moved into the graveyard and recorded.
        DISCARDED: Permanently deleted instead of copied; not recorded.
        PURGED: Was already in the graveyard and was permanently deleted.
        SKIPPED: Left untouched at the user's request.
    """

    BURIED = "buried"
    DISCARDED = "discarded"
    PURGED = "purged"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class GraveRecordEntry:
    """A single burial: where something came from and where it rests.

    Attributes:
        original: Absolute path the object was buried from.
        grave: Absolute path of the object inside the graveyard.
    """

    original: Path
    grave: Path

    def __post_init__(self) -> None:
        """Validate entry paths after initialization."""
        if not self.original.is_absolute():
            msg = f"Original path must be absolute, got {self.original}"
            raise ValueError(msg)
        if not self.grave.is_absolute():
            msg = f"Grave path must be absolute, got {self.grave}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class BuryResult:
    """Result of burying one target.

    Attributes:
        target: Target as requested by the caller.
        status: Outcome of the bury.
        source: Canonical absolute path that was acted on.
        grave: Grave path for BURIED targets, None otherwise.
    """

    target: Path
    status: BuryStatus
    source: Path
    grave: Path | None = None


@dataclass(frozen=True, slots=True)
class ExhumeResult:
    """Result of restoring one record entry.

    Attributes:
        entry: The record entry being restored.
        restored_to: Path the object was moved back to (possibly a
            conflict-adjusted variant of the original), None on failure.
        outcome: How the move completed, None on failure.
        error: Error message if the restore failed.
        stale: True when the grave no longer existed.
    """

    entry: GraveRecordEntry
    restored_to: Path | None = None
    outcome: MoveOutcome | None = None
    error: str | None = None
    stale: bool = False

    @property
    def success(self) -> bool:
        """Check if the entry was restored."""
        return self.error is None
