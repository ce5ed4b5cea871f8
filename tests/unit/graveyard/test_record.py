"""Unit tests for the burial record."""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest
from ripctl.graveyard.errors import GraveyardIOError, RecordFormatError
from ripctl.graveyard.models import GraveRecordEntry
from ripctl.graveyard.record import (
    RECORD_FILENAME,
    BurialRecord,
    check_encodable,
    decode_entry,
    encode_entry,
)


@pytest.fixture
def record(graveyard: Path) -> BurialRecord:
    """Record in a fresh graveyard."""
    graveyard.mkdir()
    return BurialRecord(graveyard)


class TestEncoding:
    """Tests for record line encoding."""

    def test_encode_entry(self) -> None:
        """Entries are written as original<TAB>grave."""
        entry = GraveRecordEntry(original=Path("/a/b c"), grave=Path("/g/a/b c"))
        assert encode_entry(entry) == "/a/b c\t/g/a/b c"

    def test_decode_entry(self) -> None:
        """A record line decodes into an entry, ignoring the newline."""
        entry = decode_entry("/a/b\t/g/a/b\n")
        assert entry == GraveRecordEntry(original=Path("/a/b"), grave=Path("/g/a/b"))

    def test_decode_wrong_field_count(self) -> None:
        """Lines without exactly two fields are rejected."""
        with pytest.raises(ValueError, match="expected 2 fields, got 1"):
            decode_entry("/only/one/path")

    def test_decode_relative_path(self) -> None:
        """Relative paths in a line are rejected."""
        with pytest.raises(ValueError):
            decode_entry("relative\t/g/relative")

    @pytest.mark.parametrize("bad", ["/a\tb", "/a\nb", "/a\rb"])
    def test_unencodable_paths(self, bad: str) -> None:
        """Separators and line breaks cannot be recorded."""
        with pytest.raises(RecordFormatError):
            check_encodable(Path(bad))

    def test_unicode_and_spaces_are_fine(self) -> None:
        """Ordinary unusual characters are accepted."""
        check_encodable(Path("/home/ann/Fotos Köln/ß 🎉.jpg"))


class TestAppendAndRead:
    """Tests for BurialRecord.append and entries."""

    def test_missing_record_is_empty(self, record: BurialRecord) -> None:
        """No record file means no entries."""
        assert record.entries() == []
        assert record.last_entry() is None

    def test_append_creates_record(self, record: BurialRecord, graveyard: Path) -> None:
        """The first append creates the record file."""
        record.append(Path("/a"), graveyard / "a")
        assert record.path == graveyard / RECORD_FILENAME
        assert record.path.read_text() == f"/a\t{graveyard / 'a'}\n"

    def test_append_creates_missing_graveyard(self, tmp_path: Path) -> None:
        """Appending to a record in a missing graveyard creates it."""
        record = BurialRecord(tmp_path / "new-graveyard")
        record.append(Path("/a"), tmp_path / "new-graveyard" / "a")
        assert len(record.entries()) == 1

    def test_entries_in_store_order(self, record: BurialRecord, graveyard: Path) -> None:
        """Entries come back oldest first."""
        record.append(Path("/a"), graveyard / "a")
        record.append(Path("/b"), graveyard / "b")
        record.append(Path("/c"), graveyard / "c")

        assert [e.original for e in record.entries()] == [Path("/a"), Path("/b"), Path("/c")]
        last = record.last_entry()
        assert last is not None
        assert last.original == Path("/c")

    def test_append_rejects_unencodable(self, record: BurialRecord, graveyard: Path) -> None:
        """An unencodable path never reaches the file."""
        with pytest.raises(RecordFormatError):
            record.append(Path("/a\tb"), graveyard / "a\tb")
        assert not record.path.exists()

    def test_corrupt_lines_skipped(
        self, record: BurialRecord, graveyard: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Malformed lines are skipped with a warning."""
        record.path.write_text(f"/a\t{graveyard}/a\ngarbage\n\n/b\t{graveyard}/b\n")

        with caplog.at_level(logging.WARNING):
            entries = record.entries()

        assert [e.original for e in entries] == [Path("/a"), Path("/b")]
        assert "Skipping corrupt record line 2" in caplog.text

    def test_append_failure_raises(self, record: BurialRecord, graveyard: Path) -> None:
        """Write errors surface as GraveyardIOError."""
        with patch("pathlib.Path.open", side_effect=PermissionError("denied")):
            with pytest.raises(GraveyardIOError, match="write record"):
                record.append(Path("/a"), graveyard / "a")


class TestQueries:
    """Tests for prefix and selector queries."""

    def test_entries_under_prefix(self, record: BurialRecord, graveyard: Path) -> None:
        """Only graves at or under the prefix match."""
        record.append(Path("/home/ann/a"), graveyard / "home/ann/a")
        record.append(Path("/home/bob/b"), graveyard / "home/bob/b")
        record.append(Path("/home/ann"), graveyard / "home/ann")

        matched = list(record.entries_under_prefix(graveyard / "home/ann"))

        assert [e.original for e in matched] == [Path("/home/ann/a"), Path("/home/ann")]

    def test_prefix_matches_whole_components(self, record: BurialRecord, graveyard: Path) -> None:
        """A prefix does not match a sibling sharing its leading characters."""
        record.append(Path("/home/anna/x"), graveyard / "home/anna/x")
        assert list(record.entries_under_prefix(graveyard / "home/ann")) == []

    def test_entries_matching_grave_or_original(
        self, record: BurialRecord, graveyard: Path
    ) -> None:
        """Selectors match on grave path or original path."""
        a = record.append(Path("/a"), graveyard / "a")
        record.append(Path("/b"), graveyard / "b")
        c = record.append(Path("/c"), graveyard / "c")

        matched = record.entries_matching([Path("/c"), graveyard / "a", Path("/nope")])

        assert matched == [a, c]

    def test_entries_matching_deduplicates(self, record: BurialRecord, graveyard: Path) -> None:
        """An entry selected twice is returned once."""
        a = record.append(Path("/a"), graveyard / "a")
        assert record.entries_matching([Path("/a"), graveyard / "a"]) == [a]

    def test_entries_matching_nothing(self, record: BurialRecord, graveyard: Path) -> None:
        """No selectors select nothing."""
        record.append(Path("/a"), graveyard / "a")
        assert record.entries_matching([]) == []


class TestRemove:
    """Tests for BurialRecord.remove."""

    def test_remove_keeps_others_in_order(self, record: BurialRecord, graveyard: Path) -> None:
        """Removing entries preserves the rest in their original order."""
        record.append(Path("/a"), graveyard / "a")
        b = record.append(Path("/b"), graveyard / "b")
        record.append(Path("/c"), graveyard / "c")

        record.remove([b])

        assert [e.original for e in record.entries()] == [Path("/a"), Path("/c")]

    def test_remove_leaves_no_temp_files(self, record: BurialRecord, graveyard: Path) -> None:
        """The rewrite replaces the record in place."""
        a = record.append(Path("/a"), graveyard / "a")
        record.remove([a])

        assert record.entries() == []
        assert sorted(p.name for p in graveyard.iterdir()) == [RECORD_FILENAME]

    def test_remove_nothing_is_noop(self, record: BurialRecord, graveyard: Path) -> None:
        """An empty removal does not touch the file."""
        record.append(Path("/a"), graveyard / "a")
        before = record.path.stat().st_mtime_ns
        record.remove([])
        assert record.path.stat().st_mtime_ns == before

    def test_remove_without_record(self, record: BurialRecord, graveyard: Path) -> None:
        """Removing from a missing record is a no-op."""
        entry = GraveRecordEntry(original=Path("/a"), grave=graveyard / "a")
        record.remove([entry])
        assert not record.path.exists()

    def test_remove_failure_keeps_record(self, record: BurialRecord, graveyard: Path) -> None:
        """A failed rewrite leaves the old record and no temp file behind."""
        a = record.append(Path("/a"), graveyard / "a")

        with patch("ripctl.graveyard.record.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(GraveyardIOError, match="rewrite record"):
                record.remove([a])

        assert record.entries() == [a]
        assert sorted(p.name for p in graveyard.iterdir()) == [RECORD_FILENAME]
