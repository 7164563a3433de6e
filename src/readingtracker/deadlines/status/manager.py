"""Status manager: validated status appends.

Every change goes through the state machine and is appended as a new entry.
Nothing is overwritten, so reactivating a finished deadline leaves its
``complete`` entry in the history.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from ..db.schemas import DeadlineStatus, ReviewTrackingRecord, StatusEntry, StatusEntryCreate
from ..db.sqlite import Database, DeadlineNotFoundError, get_db
from ..ledger import entry_instant, latest_status_entry, sorted_by_time
from .machine import validate_transition

logger = logging.getLogger(__name__)


class StatusManager:
    """Appends lifecycle changes for deadlines."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize status manager.

        Args:
            db: Database instance
        """
        self.db = db or get_db()

    def current_status(self, deadline_id: str) -> Optional[DeadlineStatus]:
        """Latest status, or None for an empty history."""
        entry = latest_status_entry(self.db.get_status_entries(deadline_id))
        return entry.status if entry else None

    def history(self, deadline_id: str) -> list[StatusEntry]:
        """Status history, most recent first."""
        return sorted_by_time(self.db.get_status_entries(deadline_id), descending=True)

    def transition(
        self,
        deadline_id: str,
        target: DeadlineStatus,
        at: Optional[datetime] = None,
    ) -> StatusEntry:
        """Append ``target`` if the lifecycle allows it.

        Args:
            deadline_id: Deadline ID
            target: Status to append
            at: Timestamp of the change (default: now)

        Returns:
            The appended entry

        Raises:
            DeadlineNotFoundError: If the deadline does not exist
            InvalidStatusTransition: If the change is not allowed
            ValueError: If ``at`` is earlier than the current status
        """
        if self.db.get_deadline(deadline_id) is None:
            raise DeadlineNotFoundError(deadline_id)

        latest = latest_status_entry(self.db.get_status_entries(deadline_id))
        current = latest.status if latest else None
        validate_transition(current, target)

        if at is not None and latest is not None:
            when = at if at.tzinfo else at.replace(tzinfo=timezone.utc)
            if when < entry_instant(latest):
                raise ValueError(
                    f"Status change at {when.isoformat()} is earlier than "
                    f"the current {current.value} status ({latest.created_at})"
                )

        entry = self.db.add_status_entry(
            StatusEntryCreate(deadline_id=deadline_id, status=target, created_at=at)
        )
        logger.info(
            "Deadline %s: %s -> %s",
            deadline_id,
            current.value if current else None,
            target.value,
        )
        return entry

    def start(self, deadline_id: str, at: Optional[datetime] = None) -> StatusEntry:
        """Activate a pending deadline."""
        return self.transition(deadline_id, DeadlineStatus.READING, at)

    def pause(self, deadline_id: str, at: Optional[datetime] = None) -> StatusEntry:
        return self.transition(deadline_id, DeadlineStatus.PAUSED, at)

    def resume(self, deadline_id: str, at: Optional[datetime] = None) -> StatusEntry:
        return self.transition(deadline_id, DeadlineStatus.READING, at)

    def mark_to_review(
        self,
        deadline_id: str,
        review_due_date: Optional[date] = None,
        needs_link_submission: bool = False,
        at: Optional[datetime] = None,
    ) -> tuple[StatusEntry, ReviewTrackingRecord]:
        """Mark the content consumed with reviews still to post.

        Creates the deadline's review tracking alongside the status entry.
        """
        entry = self.transition(deadline_id, DeadlineStatus.TO_REVIEW, at)
        review = self.db.upsert_review_tracking(
            deadline_id,
            review_due_date=review_due_date.isoformat() if review_due_date else None,
            needs_link_submission=needs_link_submission,
            all_reviews_complete=False,
        )
        return entry, review

    def complete(self, deadline_id: str, at: Optional[datetime] = None) -> StatusEntry:
        """Finish a deadline. Closes open review obligations."""
        was_in_review = self.current_status(deadline_id) == DeadlineStatus.TO_REVIEW
        entry = self.transition(deadline_id, DeadlineStatus.COMPLETE, at)
        if was_in_review:
            self.db.upsert_review_tracking(deadline_id, all_reviews_complete=True)
        return entry

    def did_not_finish(self, deadline_id: str, at: Optional[datetime] = None) -> StatusEntry:
        """Abandon a deadline."""
        return self.transition(deadline_id, DeadlineStatus.DID_NOT_FINISH, at)

    def reactivate(self, deadline_id: str, at: Optional[datetime] = None) -> StatusEntry:
        """Bring an archived deadline back to reading."""
        return self.transition(deadline_id, DeadlineStatus.READING, at)


def get_status_manager(db: Optional[Database] = None) -> StatusManager:
    """Create a status manager."""
    return StatusManager(db)
