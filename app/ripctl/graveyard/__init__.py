"""Graveyard module.

This module provides the burial record, the path mapper, the move
engine, and the bury/unbury workflows built on them.
"""

from ripctl.graveyard.errors import (
    ConflictResolutionError,
    GraveyardContainedError,
    GraveyardIOError,
    InternalInvariantError,
    RecordFormatError,
    RipError,
    SourceRemovalError,
    TargetNotFoundError,
)
from ripctl.graveyard.mapper import grave_mapping, resolve_conflict, symlink_exists
from ripctl.graveyard.models import (
    BuryResult,
    BuryStatus,
    EntryKind,
    ExhumeResult,
    GraveRecordEntry,
    MoveOutcome,
)
from ripctl.graveyard.mover import BIG_FILE_THRESHOLD, MoveEngine
from ripctl.graveyard.operator import GraveyardOperator
from ripctl.graveyard.record import RECORD_FILENAME, BurialRecord

__all__ = [
    "BIG_FILE_THRESHOLD",
    "RECORD_FILENAME",
    "BurialRecord",
    "BuryResult",
    "BuryStatus",
    "ConflictResolutionError",
    "EntryKind",
    "ExhumeResult",
    "GraveRecordEntry",
    "GraveyardContainedError",
    "GraveyardIOError",
    "GraveyardOperator",
    "InternalInvariantError",
    "MoveEngine",
    "MoveOutcome",
    "RecordFormatError",
    "RipError",
    "SourceRemovalError",
    "TargetNotFoundError",
    "grave_mapping",
    "resolve_conflict",
    "symlink_exists",
]
