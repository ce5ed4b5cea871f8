"""Relocation of filesystem objects.

The MoveEngine moves any filesystem object from one path to another.
It tries an atomic rename first and falls back to copy-then-delete
when the rename fails, typically because source and destination live
on different filesystems. A failed copy removes whatever it created
before re-raising, and the source is only deleted after its copy has
completed.
"""

import logging
import os
import shutil
import stat
from collections.abc import Callable
from pathlib import Path

from ripctl.graveyard.errors import (
    GraveyardIOError,
    InternalInvariantError,
    SourceRemovalError,
)
from ripctl.graveyard.models import EntryKind, MoveOutcome
from ripctl.utils.formatting import format_size

logger = logging.getLogger(__name__)

BIG_FILE_THRESHOLD = 500_000_000  # 500 MB

MARKER_TEXT = (
    "This is a marker for a file that was permanently deleted.  Requiescat in pace.\n"
)

# Callback asking the user a yes/no question
ConfirmFn = Callable[[str], bool]


class MoveEngine:
    """Moves filesystem objects, atomically when possible.

    Attributes:
        _confirm: Yes/no callback used for the big-file guard and for
            special files that cannot be copied.
        _big_file_threshold: Size in bytes above which copying asks for
            confirmation first.
    """

    def __init__(
        self,
        confirm: ConfirmFn,
        big_file_threshold: int = BIG_FILE_THRESHOLD,
    ) -> None:
        """Initialize the MoveEngine.

        Args:
            confirm: Callback receiving a prompt and returning the answer.
            big_file_threshold: Size guard for copies, in bytes.
        """
        self._confirm = confirm
        self._big_file_threshold = big_file_threshold

    def move_target(self, source: Path, dest: Path) -> MoveOutcome:
        """Move source to dest.

        On success source no longer exists. On failure source is left
        untouched and any partial copy at dest has been removed.

        Args:
            source: Object to move.
            dest: Destination path; must not exist yet.

        Returns:
            RENAMED or COPIED, or DISCARDED when the big-file guard
            deleted source without creating dest.

        Raises:
            GraveyardIOError: If the move fails.
        """
        try:
            dest.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise GraveyardIOError("create directory", dest.parent, reason=str(e)) from e

        logger.debug("Attempting rename from %s to %s", source, dest)
        try:
            os.rename(source, dest)
        except OSError as e:
            logger.debug("Rename failed (%s), falling back to copy and remove", e)
        else:
            return MoveOutcome.RENAMED

        try:
            st = os.lstat(source)
        except OSError as e:
            raise GraveyardIOError("stat", source, reason=str(e)) from e

        if EntryKind.from_stat(st) == EntryKind.DIRECTORY:
            self._copy_tree(source, dest)
            try:
                shutil.rmtree(source)
            except OSError as e:
                raise SourceRemovalError("remove directory", source, reason=str(e)) from e
            return MoveOutcome.COPIED

        created: list[Path] = []
        try:
            copied = self._copy_tracked(source, dest, st, created)
        except GraveyardIOError:
            _rollback(created)
            raise

        try:
            source.unlink()
        except OSError as e:
            _rollback(created)
            raise GraveyardIOError("remove file", source, reason=str(e)) from e

        return MoveOutcome.COPIED if copied else MoveOutcome.DISCARDED

    def copy_entry(self, source: Path, dest: Path, st: os.stat_result | None = None) -> bool:
        """Copy a single non-directory object.

        Args:
            source: Object to copy.
            dest: Path to create.
            st: lstat result for source, if the caller already has one.

        Returns:
            True if dest was created, False if the user chose to
            permanently delete a big file instead of copying it.

        Raises:
            GraveyardIOError: If the copy fails.
        """
        if st is None:
            try:
                st = os.lstat(source)
            except OSError as e:
                raise GraveyardIOError("stat", source, reason=str(e)) from e

        if st.st_size > self._big_file_threshold:
            prompt = (
                f"About to copy a big file ({source} is {format_size(st.st_size)})\n"
                "Permanently delete this file instead?"
            )
            if self._confirm(prompt):
                logger.debug("Discarding big file %s", source)
                return False

        try:
            self._copy_kind(source, dest, st)
        except OSError as e:
            raise GraveyardIOError("copy", source, dest, reason=str(e)) from e
        return True

    def _copy_kind(self, source: Path, dest: Path, st: os.stat_result) -> None:
        kind = EntryKind.from_stat(st)

        if kind == EntryKind.REGULAR:
            shutil.copyfile(source, dest, follow_symlinks=False)
            try:
                shutil.copystat(source, dest, follow_symlinks=False)
            except OSError as e:
                logger.debug("Could not preserve metadata of %s: %s", source, e)
        elif kind == EntryKind.SYMLINK:
            os.symlink(os.readlink(source), dest)
        elif kind == EntryKind.FIFO:
            os.mkfifo(dest, stat.S_IMODE(st.st_mode))
        elif kind == EntryKind.OTHER:
            self._copy_special(source, dest)
        else:
            msg = f"Directory passed to leaf copy: {source}"
            raise InternalInvariantError(msg)

    def _copy_special(self, source: Path, dest: Path) -> None:
        """Copy a socket, device or other special file.

        These rarely copy. On failure the user may choose to lose the
        object, in which case a marker file takes its place.
        """
        try:
            shutil.copyfile(source, dest)
        except OSError:
            prompt = f"Non-regular file or directory: {source}\nPermanently delete the file?"
            if not self._confirm(prompt):
                raise
            dest.write_text(MARKER_TEXT, encoding="utf-8")

    def _copy_tracked(
        self,
        source: Path,
        dest: Path,
        st: os.stat_result,
        created: list[Path],
    ) -> bool:
        # Registered before the attempt so a half-written file is rolled back
        created.append(dest)
        copied = self.copy_entry(source, dest, st)
        if not copied:
            created.pop()
        return copied

    def _copy_tree(self, source: Path, dest: Path) -> None:
        """Copy a directory tree without recursion.

        Walks an explicit stack of (source dir, dest dir) pairs. Each
        directory is created before anything inside it is copied.

        Raises:
            GraveyardIOError: If any part of the copy fails; everything
                created so far has been removed.
        """
        created: list[Path] = []
        pending: list[tuple[Path, Path]] = [(source, dest)]

        try:
            while pending:
                src_dir, dst_dir = pending.pop()
                try:
                    dst_dir.mkdir()
                except OSError as e:
                    raise GraveyardIOError("create directory", dst_dir, reason=str(e)) from e
                created.append(dst_dir)

                try:
                    with os.scandir(src_dir) as it:
                        children = sorted(it, key=lambda d: d.name)
                except OSError as e:
                    raise GraveyardIOError("list directory", src_dir, reason=str(e)) from e

                for child in children:
                    child_path = Path(child.path)
                    child_dest = dest / _relative_to(child_path, source)
                    try:
                        child_st = child.stat(follow_symlinks=False)
                    except OSError as e:
                        raise GraveyardIOError("stat", child_path, reason=str(e)) from e

                    if EntryKind.from_stat(child_st) == EntryKind.DIRECTORY:
                        pending.append((child_path, child_dest))
                    else:
                        self._copy_tracked(child_path, child_dest, child_st, created)
        except (GraveyardIOError, InternalInvariantError):
            _rollback(created)
            raise


def _relative_to(path: Path, root: Path) -> Path:
    """Return path relative to root, which must be one of its ancestors."""
    try:
        return path.relative_to(root)
    except ValueError as e:
        msg = f"Walked entry {path} is not under {root}"
        raise InternalInvariantError(msg) from e


def _rollback(created: list[Path]) -> None:
    """Remove created paths in reverse order, ignoring secondary errors."""
    for path in reversed(created):
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.warning("Could not roll back %s: %s", path, e)
