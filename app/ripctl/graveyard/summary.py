"""Pre-burial content summaries.

Builds the short description shown before asking whether a target
should really go to the graveyard: total size plus the first few
entries of a directory, or the first few lines of a file.
"""

import logging
import os
from itertools import islice
from pathlib import Path

from ripctl.graveyard.models import EntryKind
from ripctl.utils.formatting import format_size

logger = logging.getLogger(__name__)

LINES_TO_INSPECT = 6
FILES_TO_INSPECT = 6


def tree_size(root: Path) -> int:
    """Sum the sizes of root and everything beneath it.

    Symlinks are not followed; unreadable entries count as zero.
    """
    total = 0
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            try:
                total += os.lstat(os.path.join(dirpath, name)).st_size
            except OSError:
                continue
    return total


def summarize(target: Path, source: Path, st: os.stat_result) -> str:
    """Describe a bury target.

    Args:
        target: Target as the user named it.
        source: Canonical absolute path of the target.
        st: lstat result for source.

    Returns:
        Multi-line summary text.
    """
    lines: list[str] = []
    kind = EntryKind.from_stat(st)

    if kind == EntryKind.DIRECTORY:
        lines.append(f"{target}: directory, {format_size(tree_size(source))} including:")
        try:
            children = sorted(source.iterdir())
        except OSError as e:
            logger.debug("Could not list %s: %s", source, e)
            children = []
        lines.extend(str(child) for child in children[:FILES_TO_INSPECT])
        return "\n".join(lines)

    lines.append(f"{target}: file, {format_size(st.st_size)}")
    if kind != EntryKind.REGULAR:
        # Reading a FIFO or device would block or never end
        return "\n".join(lines)

    try:
        with source.open(encoding="utf-8", errors="replace") as f:
            for line in islice(f, LINES_TO_INSPECT):
                lines.append(f"> {line.rstrip()}")
    except OSError:
        lines.append(f"Error reading {source}")
    return "\n".join(lines)
