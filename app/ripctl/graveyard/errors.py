"""Exception hierarchy for graveyard operations.

Every failure raised by the record, the move engine, or the workflows
derives from RipError so the CLI can report it uniformly.
"""

from pathlib import Path


class RipError(Exception):
    """Base exception for graveyard errors."""


class TargetNotFoundError(RipError):
    """Raised when a target to bury does not exist."""

    def __init__(self, target: Path | str) -> None:
        self.target = Path(target)
        super().__init__(f"Cannot remove {target}: no such file or directory")


class GraveyardContainedError(RipError):
    """Raised when a target to bury contains the graveyard itself."""

    def __init__(self, target: Path | str, graveyard: Path | str) -> None:
        self.target = Path(target)
        self.graveyard = Path(graveyard)
        super().__init__(f"Cannot bury {target}: it contains the graveyard {graveyard}")


class GraveyardIOError(RipError):
    """Raised when a filesystem operation fails.

    Attributes:
        operation: Short description of what was attempted (e.g. "copy").
        path: Path the operation acted on.
        dest: Second path involved, for operations with a destination.
    """

    def __init__(
        self,
        operation: str,
        path: Path | str,
        dest: Path | str | None = None,
        reason: str | None = None,
    ) -> None:
        self.operation = operation
        self.path = Path(path)
        self.dest = Path(dest) if dest is not None else None

        if self.dest is not None:
            msg = f"Failed to {operation} {self.path} to {self.dest}"
        else:
            msg = f"Failed to {operation} {self.path}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class RecordFormatError(RipError):
    """Raised when a path cannot be encoded as a record line."""


class InternalInvariantError(RipError):
    """Raised when an internal invariant is violated.

    These indicate a defect rather than a user error.
    """


class ConflictResolutionError(InternalInvariantError):
    """Raised when no free alternate name can be found for a path."""


class SourceRemovalError(GraveyardIOError):
    """Raised when a copy completed but its source could not be removed.

    The destination holds a complete copy; the source may be partially
    deleted.
    """
