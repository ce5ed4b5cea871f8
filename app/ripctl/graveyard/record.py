"""Burial record persistence.

The record is a flat text file at <graveyard>/.record holding one
line per buried object: the original path and the grave path separated
by a tab. It lists what is currently buried, not a history: entries are
deleted when their object is exhumed.

The record is not locked. Running several ripctl processes against the
same graveyard at once can interleave appends and rewrites and lose
entries.
"""

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile

from ripctl.graveyard.errors import GraveyardIOError, RecordFormatError
from ripctl.graveyard.models import GraveRecordEntry

logger = logging.getLogger(__name__)

RECORD_FILENAME = ".record"
FIELD_SEPARATOR = "\t"

# Characters that would break the line-per-entry, tab-separated layout
_FORBIDDEN_CHARS = (FIELD_SEPARATOR, "\n", "\r")


def check_encodable(path: Path) -> None:
    """Ensure a path can be stored in the record.

    Args:
        path: Path to check.

    Raises:
        RecordFormatError: If the path contains a tab or line break.
    """
    text = str(path)
    for char in _FORBIDDEN_CHARS:
        if char in text:
            msg = f"Path contains a {char!r} character and cannot be recorded: {text!r}"
            raise RecordFormatError(msg)


def encode_entry(entry: GraveRecordEntry) -> str:
    """Serialize an entry to a record line (no trailing newline)."""
    check_encodable(entry.original)
    check_encodable(entry.grave)
    return f"{entry.original}{FIELD_SEPARATOR}{entry.grave}"


def decode_entry(line: str) -> GraveRecordEntry:
    """Deserialize a record line.

    Raises:
        ValueError: If the line does not hold two absolute paths.
    """
    fields = line.rstrip("\r\n").split(FIELD_SEPARATOR)
    if len(fields) != 2:
        msg = f"expected 2 fields, got {len(fields)}"
        raise ValueError(msg)
    return GraveRecordEntry(original=Path(fields[0]), grave=Path(fields[1]))


class BurialRecord:
    """Append-only record of buried objects.

    No file handle is kept between calls: every append opens, writes
    and closes the store, and every removal rewrites it.

    Attributes:
        graveyard: Graveyard root holding the record file.
    """

    def __init__(self, graveyard: Path) -> None:
        """Initialize BurialRecord.

        Args:
            graveyard: Graveyard root directory.
        """
        self._graveyard = graveyard

    @property
    def graveyard(self) -> Path:
        """Graveyard root holding the record file."""
        return self._graveyard

    @property
    def path(self) -> Path:
        """Path to the record file."""
        return self._graveyard / RECORD_FILENAME

    def append(self, original: Path, grave: Path) -> GraveRecordEntry:
        """Append a burial to the record.

        Creates the graveyard and the record file if they are missing.

        Args:
            original: Absolute path the object was buried from.
            grave: Absolute path of the object in the graveyard.

        Returns:
            The recorded entry.

        Raises:
            RecordFormatError: If either path cannot be encoded.
            GraveyardIOError: If the record cannot be written.
        """
        entry = GraveRecordEntry(original=original, grave=grave)
        line = encode_entry(entry)

        try:
            self._graveyard.mkdir(parents=True, exist_ok=True)
            with self.path.open(mode="a", encoding="utf-8") as f:
                f.write(line + "\n")
                f.flush()
        except OSError as e:
            raise GraveyardIOError("write record", self.path, reason=str(e)) from e

        logger.debug("Recorded %s -> %s", original, grave)
        return entry

    def entries(self) -> list[GraveRecordEntry]:
        """Read all entries in store order (oldest first).

        Corrupt lines are skipped with a warning. A missing record reads
        as empty.

        Raises:
            GraveyardIOError: If the record exists but cannot be read.
        """
        if not self.path.exists():
            return []

        entries: list[GraveRecordEntry] = []
        try:
            with self.path.open(encoding="utf-8") as f:
                for line_num, line in enumerate(f, start=1):
                    if not line.strip():
                        continue
                    try:
                        entries.append(decode_entry(line))
                    except ValueError as e:
                        logger.warning("Skipping corrupt record line %d: %s", line_num, e)
        except OSError as e:
            raise GraveyardIOError("read record", self.path, reason=str(e)) from e

        return entries

    def last_entry(self) -> GraveRecordEntry | None:
        """Get the most recently appended entry, or None if there is none."""
        entries = self.entries()
        if not entries:
            return None
        return entries[-1]

    def entries_under_prefix(self, prefix: Path) -> Iterator[GraveRecordEntry]:
        """Yield entries whose grave path lies at or beneath prefix.

        Matching is per path component, so a prefix of /g/home/ann does
        not match /g/home/anna.

        Args:
            prefix: Grave directory to search under.

        Yields:
            Matching entries in store order.
        """
        for entry in self.entries():
            if entry.grave == prefix or entry.grave.is_relative_to(prefix):
                yield entry

    def entries_matching(self, selectors: Iterable[Path]) -> list[GraveRecordEntry]:
        """Resolve selectors to record entries.

        A selector matches an entry whose grave path or original path
        equals it. Selectors matching nothing are ignored.

        Args:
            selectors: Absolute grave or original paths.

        Returns:
            Matching entries in store order, without duplicates.
        """
        wanted = set(selectors)
        if not wanted:
            return []

        matched: list[GraveRecordEntry] = []
        for entry in self.entries():
            if (entry.grave in wanted or entry.original in wanted) and entry not in matched:
                matched.append(entry)
        return matched

    def remove(self, entries: Iterable[GraveRecordEntry]) -> None:
        """Remove entries from the record.

        Reads the whole store, filters out the given entries, and writes
        the rest to a temporary file that then replaces the record. A
        crash between read and replace loses nothing, but concurrent
        writers are not detected.

        Args:
            entries: Entries to remove.

        Raises:
            GraveyardIOError: If the record cannot be read or rewritten.
        """
        doomed = set(entries)
        if not doomed or not self.path.exists():
            return

        kept = [entry for entry in self.entries() if entry not in doomed]

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._graveyard,
                prefix=RECORD_FILENAME,
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                for entry in kept:
                    f.write(encode_entry(entry) + "\n")
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise GraveyardIOError("rewrite record", self.path, reason=str(e)) from e

        logger.debug("Removed %d entries from record", len(doomed))
