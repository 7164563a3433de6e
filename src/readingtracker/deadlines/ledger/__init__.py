"""Current-value derivation over append-only ledgers."""

from .history import (
    Ledger,
    counted_entries,
    entry_instant,
    first_progress,
    latest_progress,
    latest_progress_entry,
    latest_status,
    latest_status_entry,
    paused_since,
    progress_as_of,
    sorted_by_time,
)

__all__ = [
    "Ledger",
    "counted_entries",
    "entry_instant",
    "first_progress",
    "latest_progress",
    "latest_progress_entry",
    "latest_status",
    "latest_status_entry",
    "paused_since",
    "progress_as_of",
    "sorted_by_time",
]
