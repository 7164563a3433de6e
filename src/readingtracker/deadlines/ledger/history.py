"""Derivation of "current" values from append-only entry histories.

Entries may arrive out of order (an optimistic local append reconciled later
against the server), so nothing here trusts list position. Every "latest" or
"first" value is chosen by ``created_at``.

Tie-breaks, since entries carry no sequence number:

- latest progress: equal timestamps prefer the larger ``current_progress``
- latest status: equal timestamps prefer the later insertion
- first progress: equal timestamps prefer the earlier insertion

Entries with a missing or unparseable ``created_at`` sort as the oldest.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from ..dates import parse_server_datetime
from ..db.schemas import (
    DeadlineRecord,
    DeadlineStatus,
    ProgressEntry,
    ReviewTrackingRecord,
    StatusEntry,
)

OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def entry_instant(entry) -> datetime:
    """Sortable UTC instant of an entry's ``created_at``."""
    parsed = parse_server_datetime(entry.created_at, timezone.utc)
    return parsed if parsed is not None else OLDEST


def sorted_by_time(entries: Iterable, descending: bool = False) -> list:
    """Entries ordered by ``created_at``, stable for equal timestamps."""
    return sorted(entries, key=entry_instant, reverse=descending)


# ============================================================================
# Progress
# ============================================================================


def counted_entries(entries: Iterable[ProgressEntry]) -> list[ProgressEntry]:
    """Entries that take part in calculations."""
    return [e for e in entries if not e.ignore_in_calcs]


def latest_progress_entry(entries: Sequence[ProgressEntry]) -> Optional[ProgressEntry]:
    """Most recent counted progress entry, or None."""
    counted = counted_entries(entries)
    if not counted:
        return None
    return max(counted, key=lambda e: (entry_instant(e), e.current_progress))


def latest_progress(entries: Sequence[ProgressEntry]) -> int:
    """Current cumulative progress. Zero when nothing has been counted."""
    entry = latest_progress_entry(entries)
    return entry.current_progress if entry else 0


def first_progress(entries: Sequence[ProgressEntry]) -> Optional[ProgressEntry]:
    """Earliest progress entry, the "started N days ago" anchor."""
    if not entries:
        return None
    return min(enumerate(entries), key=lambda p: (entry_instant(p[1]), p[0]))[1]


def progress_as_of(entries: Sequence[ProgressEntry], instant: datetime) -> int:
    """Counted progress at a given instant (inclusive).

    Args:
        entries: Progress history
        instant: Aware datetime; entries after it are ignored

    Returns:
        Cumulative progress at that instant, 0 if none
    """
    earlier = [e for e in counted_entries(entries) if entry_instant(e) <= instant]
    return latest_progress(earlier)


# ============================================================================
# Status
# ============================================================================


def latest_status_entry(entries: Sequence[StatusEntry]) -> Optional[StatusEntry]:
    """Most recent status entry, or None."""
    if not entries:
        return None
    return max(enumerate(entries), key=lambda p: (entry_instant(p[1]), p[0]))[1]


def latest_status(entries: Sequence[StatusEntry]) -> DeadlineStatus:
    """Current status. An empty history reads as ``reading``."""
    entry = latest_status_entry(entries)
    return entry.status if entry else DeadlineStatus.READING


def paused_since(entries: Sequence[StatusEntry]) -> Optional[str]:
    """Timestamp of the most recent ``paused`` entry."""
    paused = [e for e in entries if e.status == DeadlineStatus.PAUSED]
    entry = latest_status_entry(paused)
    return entry.created_at if entry else None


# ============================================================================
# Ledger
# ============================================================================


@dataclass
class Ledger:
    """Append-only log of every entry, indexed by deadline.

    Entries live in two growable lists. The per-deadline indexes hold
    positions into those lists and are only ever extended.
    """

    deadlines: dict[str, DeadlineRecord] = field(default_factory=dict)
    progress: list[ProgressEntry] = field(default_factory=list)
    statuses: list[StatusEntry] = field(default_factory=list)
    reviews: dict[str, ReviewTrackingRecord] = field(default_factory=dict)
    _progress_index: dict[str, list[int]] = field(default_factory=dict, repr=False)
    _status_index: dict[str, list[int]] = field(default_factory=dict, repr=False)

    def add_deadline(self, deadline: DeadlineRecord) -> None:
        """Register a deadline record."""
        self.deadlines[deadline.id] = deadline
        self._progress_index.setdefault(deadline.id, [])
        self._status_index.setdefault(deadline.id, [])

    def append_progress(self, entry: ProgressEntry) -> None:
        """Append a progress entry."""
        self._progress_index.setdefault(entry.deadline_id, []).append(len(self.progress))
        self.progress.append(entry)

    def append_status(self, entry: StatusEntry) -> None:
        """Append a status entry."""
        self._status_index.setdefault(entry.deadline_id, []).append(len(self.statuses))
        self.statuses.append(entry)

    def attach_review(self, review: ReviewTrackingRecord) -> None:
        """Attach review tracking to its deadline (1:1)."""
        self.reviews[review.deadline_id] = review

    def progress_for(self, deadline_id: str) -> list[ProgressEntry]:
        """Progress entries of one deadline, in insertion order."""
        return [self.progress[i] for i in self._progress_index.get(deadline_id, [])]

    def statuses_for(self, deadline_id: str) -> list[StatusEntry]:
        """Status entries of one deadline, in insertion order."""
        return [self.statuses[i] for i in self._status_index.get(deadline_id, [])]

    def review_for(self, deadline_id: str) -> Optional[ReviewTrackingRecord]:
        return self.reviews.get(deadline_id)

    def current_status(self, deadline_id: str) -> DeadlineStatus:
        return latest_status(self.statuses_for(deadline_id))

    def current_progress(self, deadline_id: str) -> int:
        return latest_progress(self.progress_for(deadline_id))

    def __len__(self) -> int:
        return len(self.deadlines)

    @classmethod
    def from_records(
        cls,
        deadlines: Iterable[DeadlineRecord],
        progress: Iterable[ProgressEntry] = (),
        statuses: Iterable[StatusEntry] = (),
        reviews: Iterable[ReviewTrackingRecord] = (),
    ) -> "Ledger":
        """Build a ledger from flat record lists."""
        ledger = cls()
        for deadline in deadlines:
            ledger.add_deadline(deadline)
        for entry in progress:
            ledger.append_progress(entry)
        for entry in statuses:
            ledger.append_status(entry)
        for review in reviews:
            ledger.attach_review(review)
        return ledger
