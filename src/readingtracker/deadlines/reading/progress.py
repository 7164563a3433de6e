"""Reading progress appends and per-day progress helpers.

Progress is always logged as a cumulative position (page reached, or
milliseconds listened), never as a delta.
"""

import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional, Sequence

from ..dates import local_date_of, local_today
from ..db.schemas import (
    DeadlineStatus,
    ProgressEntry,
    ProgressEntryCreate,
    StatusEntryCreate,
)
from ..db.sqlite import Database, DeadlineNotFoundError, get_db
from ..ledger import (
    entry_instant,
    first_progress,
    latest_progress,
    latest_status_entry,
    sorted_by_time,
)
from ..pace.display import format_progress_display
from ..pace.required import clamp_progress, progress_percentage, remaining_quantity
from ..pace.user_pace import to_display_units

logger = logging.getLogger(__name__)


def progress_at_start_of_day(
    entries: Sequence[ProgressEntry],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Counted progress as it stood at the end of yesterday."""
    today = local_today(now, tz)
    earlier = []
    for entry in entries:
        day = local_date_of(entry.created_at, tz)
        if day is not None and day < today:
            earlier.append(entry)
    return latest_progress(earlier)


def progress_for_today(
    entries: Sequence[ProgressEntry],
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> int:
    """Amount consumed today, in stored units. Never negative."""
    return max(0, latest_progress(entries) - progress_at_start_of_day(entries, now, tz))


class ProgressTracker:
    """Logs reading progress and reports where a deadline stands."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize progress tracker.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def log_progress(
        self,
        deadline_id: str,
        current_progress: int,
        ignore_in_calcs: bool = False,
        at: Optional[datetime] = None,
    ) -> ProgressEntry:
        """Append a cumulative progress entry.

        The first progress on a pending deadline starts it: a ``reading``
        status entry is appended with the same timestamp, or at the
        pending entry's time when the progress is backdated before it.

        Args:
            deadline_id: Deadline ID
            current_progress: Page reached, or milliseconds for audio
            ignore_in_calcs: Exclude from pace calculations (corrections)
            at: Timestamp of the entry (default: now)

        Returns:
            The appended entry

        Raises:
            DeadlineNotFoundError: If the deadline does not exist
            ValueError: If progress is negative
        """
        if current_progress < 0:
            raise ValueError("Progress cannot be negative")

        deadline = self.db.get_deadline(deadline_id)
        if deadline is None:
            raise DeadlineNotFoundError(deadline_id)

        if current_progress > deadline.total_quantity:
            logger.warning(
                "Progress %s exceeds total %s for deadline %s",
                current_progress,
                deadline.total_quantity,
                deadline_id,
            )

        entry = self.db.add_progress_entry(
            ProgressEntryCreate(
                deadline_id=deadline_id,
                current_progress=current_progress,
                ignore_in_calcs=ignore_in_calcs,
                created_at=at,
            )
        )

        status = latest_status_entry(self.db.get_status_entries(deadline_id))
        if status is not None and status.status == DeadlineStatus.PENDING:
            started_at = at or datetime.now(timezone.utc)
            if started_at.tzinfo is None:
                started_at = started_at.replace(tzinfo=timezone.utc)
            self.db.add_status_entry(
                StatusEntryCreate(
                    deadline_id=deadline_id,
                    status=DeadlineStatus.READING,
                    created_at=max(started_at, entry_instant(status)),
                )
            )
            logger.info("Deadline %s started by first progress", deadline_id)

        return entry

    def get_deadline_progress(
        self,
        deadline_id: str,
        now: Optional[datetime] = None,
        tz: Optional[tzinfo] = None,
    ) -> dict:
        """Get progress info for a specific deadline.

        Args:
            deadline_id: Deadline ID
            now: Reference instant (default: current time)
            tz: Local zone for day boundaries

        Returns:
            Dictionary with progress info:
            - current_progress: Latest counted position (stored units)
            - total_quantity: Deadline's total (stored units)
            - progress_percent: Rounded percentage of the clamped progress
            - remaining: Pages or minutes left
            - progress_today: Pages or minutes consumed today
            - progress_display: Human-readable position
            - started_at: Timestamp of the earliest entry, if any
            - entries_count: Number of progress entries
        """
        deadline = self.db.get_deadline(deadline_id)
        if deadline is None:
            raise DeadlineNotFoundError(deadline_id)

        entries = self.db.get_progress_entries(deadline_id)
        current = latest_progress(entries)
        unit = deadline.format.unit
        first = first_progress(entries)

        return {
            "deadline_id": deadline_id,
            "title": deadline.title,
            "current_progress": current,
            "total_quantity": deadline.total_quantity,
            "progress_percent": progress_percentage(current, deadline.total_quantity),
            "remaining": to_display_units(
                remaining_quantity(deadline.total_quantity, current), unit
            ),
            "progress_today": to_display_units(progress_for_today(entries, now, tz), unit),
            "progress_display": format_progress_display(
                deadline.format, clamp_progress(current, deadline.total_quantity)
            ),
            "started_at": first.created_at if first else None,
            "entries_count": len(entries),
        }

    def get_progress_history(self, deadline_id: str, limit: int = 50) -> list[ProgressEntry]:
        """Progress entries of a deadline, most recent first."""
        entries = self.db.get_progress_entries(deadline_id)
        return sorted_by_time(entries, descending=True)[:limit]


def get_progress_tracker(db: Optional[Database] = None) -> ProgressTracker:
    """Create a progress tracker."""
    return ProgressTracker(db)
