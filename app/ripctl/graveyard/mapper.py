"""Mapping of original paths to grave paths.

A grave path mirrors the original absolute path beneath the graveyard
root, so /home/user/notes.txt rests at <graveyard>/home/user/notes.txt.
When that spot is taken, a numbered "~N" suffix picks a free one.
"""

import os
from pathlib import Path

from ripctl.graveyard.errors import ConflictResolutionError

MAX_CONFLICT_SUFFIX = 100_000


def grave_mapping(graveyard: Path, source: Path) -> Path:
    """Compute where an absolute path rests inside the graveyard.

    Pure function: performs no I/O and does not consult the working
    directory.

    Args:
        graveyard: Graveyard root directory.
        source: Absolute, canonicalized path of the object to bury.

    Returns:
        Grave path mirroring source beneath graveyard.

    Raises:
        ValueError: If source is not absolute.
    """
    if not source.is_absolute():
        msg = f"Cannot map relative path into the graveyard: {source}"
        raise ValueError(msg)
    # Drop the anchor ("/" or "C:\\") and re-root the remaining parts
    return graveyard.joinpath(*source.parts[1:])


def symlink_exists(path: Path) -> bool:
    """Check whether anything occupies path, dangling symlinks included."""
    try:
        os.lstat(path)
    except FileNotFoundError:
        return False
    except NotADirectoryError:
        return False
    return True


def resolve_conflict(candidate: Path) -> Path:
    """Return candidate if it is free, else the first free "~N" variant.

    Args:
        candidate: Preferred destination path.

    Returns:
        A path not currently visible to lstat.

    Raises:
        ConflictResolutionError: If every suffix up to
            MAX_CONFLICT_SUFFIX is taken.
    """
    if not symlink_exists(candidate):
        return candidate

    for i in range(1, MAX_CONFLICT_SUFFIX + 1):
        alternate = candidate.with_name(f"{candidate.name}~{i}")
        if not symlink_exists(alternate):
            return alternate

    msg = f"No free name for {candidate} after {MAX_CONFLICT_SUFFIX} attempts"
    raise ConflictResolutionError(msg)
