"""Shared Rich display functions for burial results.

Provides table builders and summary printers used by the bury,
unbury and seance commands.
"""

from rich.markup import escape
from rich.table import Table

from ripctl.graveyard.models import BuryResult, BuryStatus, ExhumeResult, GraveRecordEntry
from ripctl.utils.formatting import console, print_success, print_warning

_STATUS_STYLES = {
    BuryStatus.BURIED: "buried",
    BuryStatus.DISCARDED: "purged",
    BuryStatus.PURGED: "purged",
    BuryStatus.SKIPPED: "muted",
}


def create_bury_table(results: list[BuryResult]) -> Table:
    """Create a Rich table of bury results.

    Args:
        results: Results in processing order.

    Returns:
        Table with Status, Target and Grave columns.
    """
    table = Table(
        title="Burials",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=10, justify="center")
    table.add_column("Target", no_wrap=True)
    table.add_column("Grave", style="grave")

    for result in results:
        style = _STATUS_STYLES[result.status]
        if result.grave is not None:
            grave = escape(str(result.grave))
        elif result.status == BuryStatus.DISCARDED:
            grave = "[muted]permanently deleted[/muted]"
        else:
            grave = "-"
        table.add_row(
            f"[{style}]{result.status.value}[/{style}]",
            escape(str(result.target)),
            grave,
        )

    return table


def create_seance_table(entries: list[GraveRecordEntry]) -> Table:
    """Create a Rich table of buried entries.

    Args:
        entries: Record entries in record order.

    Returns:
        Table with Original and Grave columns.
    """
    table = Table(
        title="Graves",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Original", no_wrap=True)
    table.add_column("Grave", style="grave")

    for entry in entries:
        table.add_row(escape(str(entry.original)), escape(str(entry.grave)))

    return table


def print_exhume_results(results: list[ExhumeResult]) -> None:
    """Print one line per restored entry, then a summary.

    Args:
        results: Results in processing order.
    """
    for result in results:
        grave = escape(str(result.entry.grave))
        if result.success:
            restored = escape(str(result.restored_to))
            console.print(f"[exhumed]Returned[/exhumed] {grave} to {restored}")
        else:
            console.print(f"[error]Failed[/error] {grave}: {escape(result.error or '')}")

    fail_count = sum(1 for r in results if not r.success)
    if fail_count == 0:
        print_success(f"Restored {len(results)} grave(s).")
    else:
        print_warning(f"{len(results) - fail_count} restored, {fail_count} failed")
