"""Graveyard workflows.

GraveyardOperator ties the path mapper, the burial record and the move
engine together into the user-facing operations: bury, unbury, seance
and decompose.
"""

import logging
import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from ripctl.graveyard.errors import (
    GraveyardContainedError,
    GraveyardIOError,
    RipError,
    SourceRemovalError,
    TargetNotFoundError,
)
from ripctl.graveyard.mapper import grave_mapping, resolve_conflict, symlink_exists
from ripctl.graveyard.models import (
    BuryResult,
    BuryStatus,
    ExhumeResult,
    GraveRecordEntry,
    MoveOutcome,
)
from ripctl.graveyard.mover import BIG_FILE_THRESHOLD, ConfirmFn, MoveEngine
from ripctl.graveyard.record import BurialRecord, check_encodable
from ripctl.graveyard.summary import summarize

logger = logging.getLogger(__name__)


class GraveyardOperator:
    """Buries and exhumes filesystem objects.

    Not safe for concurrent invocations against the same graveyard.

    Attributes:
        graveyard: Resolved graveyard root.
        record: Burial record stored in the graveyard.
    """

    def __init__(
        self,
        graveyard: Path,
        confirm: ConfirmFn,
        cwd: Path | None = None,
        big_file_threshold: int = BIG_FILE_THRESHOLD,
        inspect: bool = False,
    ) -> None:
        """Initialize the GraveyardOperator.

        Args:
            graveyard: Existing graveyard root directory.
            confirm: Yes/no callback for every interactive decision.
            cwd: Directory relative targets and seances are taken from.
                Default: the process working directory.
            big_file_threshold: Size above which copies ask first.
            inspect: Show a summary and ask before burying each target.
        """
        self.graveyard = graveyard.resolve()
        self.record = BurialRecord(self.graveyard)
        self._confirm = confirm
        self._cwd = cwd if cwd is not None else Path.cwd()
        self._inspect = inspect
        self._engine = MoveEngine(confirm, big_file_threshold=big_file_threshold)

    # =========================================================================
    # Bury
    # =========================================================================

    def bury(self, targets: Iterable[Path]) -> list[BuryResult]:
        """Bury targets in order, stopping at the first failure.

        Targets processed before a failure stay buried and recorded.

        Args:
            targets: Paths to bury, absolute or relative to cwd.

        Returns:
            One BuryResult per target.

        Raises:
            RipError: On the first target that cannot be buried.
        """
        return [self.bury_target(target) for target in targets]

    def bury_target(self, target: Path) -> BuryResult:
        """Bury a single target.

        Args:
            target: Path to bury, absolute or relative to cwd.

        Returns:
            BuryResult describing what happened.

        Raises:
            TargetNotFoundError: If target does not exist.
            GraveyardContainedError: If target contains the graveyard.
            RecordFormatError: If target's path cannot be recorded.
            GraveyardIOError: If moving or recording fails.
        """
        joined = self._cwd / target
        try:
            st = os.lstat(joined)
        except FileNotFoundError as e:
            raise TargetNotFoundError(target) from e
        except OSError as e:
            raise GraveyardIOError("stat", joined, reason=str(e)) from e

        source = _canonicalize(joined)
        logger.debug("Burying %s (canonical %s)", target, source)

        if source != self.graveyard and self.graveyard.is_relative_to(source):
            raise GraveyardContainedError(target, self.graveyard)

        if self._inspect:
            prompt = f"{summarize(target, source, st)}\nSend {target} to the graveyard?"
            if not self._confirm(prompt):
                return BuryResult(target=target, status=BuryStatus.SKIPPED, source=source)

        if source == self.graveyard or source.is_relative_to(self.graveyard):
            return self._purge(target, source)

        dest = resolve_conflict(grave_mapping(self.graveyard, source))
        check_encodable(source)
        check_encodable(dest)

        try:
            outcome = self._engine.move_target(source, dest)
        except SourceRemovalError:
            # dest holds the only complete copy now
            self.record.append(source, dest)
            raise
        except RipError:
            _discard_partial(dest)
            raise

        if outcome == MoveOutcome.DISCARDED:
            return BuryResult(target=target, status=BuryStatus.DISCARDED, source=source)

        self.record.append(source, dest)
        return BuryResult(target=target, status=BuryStatus.BURIED, source=source, grave=dest)

    def _purge(self, target: Path, source: Path) -> BuryResult:
        """Offer to permanently delete something already in the graveyard."""
        if not self._confirm(f"{source} is already in the graveyard.\nPermanently unlink it?"):
            logger.debug("Skipping %s", source)
            return BuryResult(target=target, status=BuryStatus.SKIPPED, source=source)

        try:
            if source.is_dir() and not source.is_symlink():
                shutil.rmtree(source)
            else:
                source.unlink()
        except OSError as e:
            raise GraveyardIOError("unlink", source, reason=str(e)) from e

        # Anything recorded at or below the purged path is gone for good
        self.record.remove(list(self.record.entries_under_prefix(source)))
        return BuryResult(target=target, status=BuryStatus.PURGED, source=source)

    # =========================================================================
    # Unbury
    # =========================================================================

    def unbury(self, selectors: Iterable[Path] = (), seance: bool = False) -> list[ExhumeResult]:
        """Restore buried objects to where they came from.

        Selectors name grave paths or original paths. With seance=True,
        everything buried from under cwd is added. With no selectors at
        all, the most recent burial is restored.

        Entries are removed from the record only when their object left
        the graveyard: restored, discarded by the big-file guard, or
        found missing. Entries whose restore failed stay recorded.

        Args:
            selectors: Grave or original paths, absolute or relative to cwd.
            seance: Also restore every grave under cwd.

        Returns:
            One ExhumeResult per matched entry.

        Raises:
            GraveyardIOError: If the record cannot be read or rewritten.
        """
        wanted = [_canonicalize(Path(os.path.abspath(self._cwd / s))) for s in selectors]

        if seance:
            wanted.extend(entry.grave for entry in self.seance())

        if not wanted:
            last = self.record.last_entry()
            if last is not None:
                logger.debug("No graves passed, using last burial %s", last.grave)
                wanted.append(last.grave)

        results = [self._exhume(entry) for entry in self.record.entries_matching(wanted)]

        finished = [r.entry for r in results if r.success or r.stale]
        self.record.remove(finished)
        return results

    def _exhume(self, entry: GraveRecordEntry) -> ExhumeResult:
        if not symlink_exists(entry.grave):
            logger.warning("Grave %s no longer exists, dropping it from the record", entry.grave)
            return ExhumeResult(
                entry=entry,
                error=f"Grave no longer exists: {entry.grave}",
                stale=True,
            )

        # Never clobber whatever now occupies the original location
        dest = resolve_conflict(entry.original)
        logger.debug("Exhuming %s to %s", entry.grave, dest)

        try:
            outcome = self._engine.move_target(entry.grave, dest)
        except RipError as e:
            return ExhumeResult(entry=entry, error=f"Unbury failed: {e}")

        return ExhumeResult(entry=entry, restored_to=dest, outcome=outcome)

    # =========================================================================
    # Seance and decompose
    # =========================================================================

    def seance(self, prefix: Path | None = None) -> list[GraveRecordEntry]:
        """List buried entries whose grave lies under prefix.

        Args:
            prefix: Grave directory to search. Default: the grave path
                of the working directory.

        Returns:
            Matching entries in record order.
        """
        if prefix is None:
            prefix = grave_mapping(self.graveyard, self._cwd.resolve())
        return list(self.record.entries_under_prefix(prefix))

    def decompose(self) -> bool:
        """Permanently delete the whole graveyard, record included.

        Returns:
            True if the graveyard was deleted, False if the user declined.

        Raises:
            GraveyardIOError: If deletion fails.
        """
        if not self._confirm("Really unlink the entire graveyard?"):
            return False

        try:
            shutil.rmtree(self.graveyard)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise GraveyardIOError("remove graveyard", self.graveyard, reason=str(e)) from e

        logger.debug("Removed graveyard %s", self.graveyard)
        return True


def _canonicalize(path: Path) -> Path:
    """Resolve a path, keeping a trailing symlink itself unresolved."""
    if path.is_symlink():
        return path.parent.resolve() / path.name
    return path.resolve()


def _discard_partial(dest: Path) -> None:
    """Best-effort removal of anything left at dest by a failed move."""
    try:
        if dest.is_dir() and not dest.is_symlink():
            shutil.rmtree(dest)
        elif symlink_exists(dest):
            dest.unlink()
    except OSError as e:
        logger.warning("Could not clean up %s: %s", dest, e)
