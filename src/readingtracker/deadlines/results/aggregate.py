"""Result aggregation: one immutable result per deadline.

Everything here is a pure function of its inputs and ``now``. The same
ledger, reference instant and zone always yield equal results, so callers may
recompute on every poll or memoise on ``snapshot_cache_key``.
"""

import hashlib
import json
import logging
from datetime import date, datetime, tzinfo
from typing import TYPE_CHECKING, Iterable, Optional, Sequence

from ..dates import calculate_local_days_left, local_today, parse_server_date_only
from ..db.schemas import (
    DeadlineRecord,
    DeadlineStatus,
    PaceUnit,
    ProgressEntry,
    ReviewTrackingRecord,
    StatusEntry,
)
from ..ledger import Ledger, entry_instant, latest_progress, latest_status
from ..pace import (
    MAX_MINUTES_PER_DAY,
    MAX_PAGES_PER_DAY,
    MIN_ACTIVE_DAYS,
    PACE_WINDOW_DAYS,
    UserPaceData,
    calculate_user_pace,
    classify_urgency,
    format_pace_display,
    format_required_pace_display,
    progress_percentage,
    required_pace_from,
    urgency_message,
    urgency_rank,
)
from ..status.machine import is_archived
from .schemas import DeadlineCalculationResult, DeadlineGroups

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)


def calculate_deadline(
    deadline: DeadlineRecord,
    progress: Sequence[ProgressEntry],
    statuses: Sequence[StatusEntry],
    user_pace: UserPaceData,
    listening_pace: UserPaceData,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    review: Optional[ReviewTrackingRecord] = None,
    config: Optional["Config"] = None,
) -> DeadlineCalculationResult:
    """Calculate the figures of a single deadline.

    Args:
        deadline: Deadline record
        progress: Its progress entries, in any order
        statuses: Its status entries, in any order
        user_pace: Pages/day pace of the user
        listening_pace: Minutes/day pace of the user
        now: Reference instant (default: current time)
        tz: Local zone for calendar days
        review: Review tracking, if the deadline has any
        config: Supplies the plausibility caps (default: built-in caps)

    Returns:
        Immutable result record
    """
    unit = deadline.format.unit
    pace = listening_pace if unit is PaceUnit.MINUTES else user_pace

    max_pages = config.max_pages_per_day if config else MAX_PAGES_PER_DAY
    max_minutes = config.max_minutes_per_day if config else MAX_MINUTES_PER_DAY

    current = latest_progress(progress)
    days_left = calculate_local_days_left(deadline.deadline_date, now, tz)
    required = required_pace_from(deadline.total_quantity, current, days_left, deadline.format)
    urgency = classify_urgency(
        days_left,
        required,
        pace.average_pace,
        deadline.format,
        max_pages_per_day=max_pages,
        max_minutes_per_day=max_minutes,
    )
    status = latest_status(statuses)

    user_pace_display = format_pace_display(pace.average_pace, deadline.format)
    required_display = format_required_pace_display(required, deadline.format)

    review_days_left = None
    if review is not None and review.review_due_date:
        review_days_left = calculate_local_days_left(review.review_due_date, now, tz)

    return DeadlineCalculationResult(
        deadline_id=deadline.id,
        title=deadline.title,
        format=deadline.format,
        unit=unit,
        deadline_date=deadline.deadline_date,
        created_at=deadline.created_at,
        current_progress=current,
        total_quantity=deadline.total_quantity,
        remaining=required.remaining,
        progress_percentage=progress_percentage(current, deadline.total_quantity),
        days_left=days_left,
        required_pace=required.pace,
        required_pace_sentinel=required.sentinel,
        required_pace_display=required_display,
        user_pace=pace.average_pace,
        user_pace_display=user_pace_display,
        pace_reliability=pace.calculation_method,
        pace_message=urgency_message(
            urgency, pace.calculation_method, user_pace_display, required_display
        ),
        urgency=urgency,
        status=status,
        is_archived=is_archived(status),
        review_days_left=review_days_left,
    )


def calculate_paces(
    ledger: Ledger,
    tz: Optional[tzinfo] = None,
    config: Optional["Config"] = None,
) -> tuple[UserPaceData, UserPaceData]:
    """Reading and listening pace of the whole ledger."""
    window_days = config.pace_window_days if config else PACE_WINDOW_DAYS
    min_active_days = config.min_active_days if config else MIN_ACTIVE_DAYS

    reading = calculate_user_pace(
        ledger,
        PaceUnit.PAGES,
        tz,
        window_days=window_days,
        min_active_days=min_active_days,
        default_pace=config.default_reading_pace if config else None,
    )
    listening = calculate_user_pace(
        ledger,
        PaceUnit.MINUTES,
        tz,
        window_days=window_days,
        min_active_days=min_active_days,
        default_pace=config.default_listening_pace if config else None,
    )
    return reading, listening


def calculate_all(
    ledger: Ledger,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
    config: Optional["Config"] = None,
) -> list[DeadlineCalculationResult]:
    """Calculate every deadline of a ledger.

    Both paces are computed once and shared by all deadlines.
    """
    reading, listening = calculate_paces(ledger, tz, config)
    results = [
        calculate_deadline(
            deadline,
            ledger.progress_for(deadline.id),
            ledger.statuses_for(deadline.id),
            reading,
            listening,
            now=now,
            tz=tz,
            review=ledger.review_for(deadline.id),
            config=config,
        )
        for deadline in ledger.deadlines.values()
    ]
    logger.debug("Calculated %d deadlines", len(results))
    return sort_deadlines(results)


# ============================================================================
# Grouping and Ordering
# ============================================================================


def _due_date(result: DeadlineCalculationResult) -> date:
    # Unknown due dates sort last
    return parse_server_date_only(result.deadline_date) or date.max


def sort_deadlines(results: Iterable[DeadlineCalculationResult]) -> list[DeadlineCalculationResult]:
    """Order by due date, earliest first, then most recently created first."""
    newest_first = sorted(results, key=entry_instant, reverse=True)
    return sorted(newest_first, key=_due_date)


def separate_deadlines(results: Iterable[DeadlineCalculationResult]) -> DeadlineGroups:
    """Split results into dashboard groups, each sorted.

    Archived statuses win over everything else. Overdue only applies to
    deadlines still being read.
    """
    groups = DeadlineGroups()
    for result in results:
        if result.is_archived:
            groups.archived.append(result)
        elif result.status == DeadlineStatus.PENDING:
            groups.pending.append(result)
        elif result.status == DeadlineStatus.PAUSED:
            groups.paused.append(result)
        elif result.status == DeadlineStatus.TO_REVIEW:
            groups.to_review.append(result)
        elif result.is_overdue:
            groups.overdue.append(result)
        else:
            groups.active.append(result)

    groups.active = sort_deadlines(groups.active)
    groups.overdue = sort_deadlines(groups.overdue)
    groups.pending = sort_deadlines(groups.pending)
    groups.paused = sort_deadlines(groups.paused)
    groups.to_review = sort_deadlines(groups.to_review)
    groups.archived = sort_deadlines(groups.archived)
    return groups


def rank_for_notifications(
    results: Iterable[DeadlineCalculationResult],
) -> list[DeadlineCalculationResult]:
    """Non-archived deadlines, most pressing first.

    Ordered by urgency bucket, then by days left. Unknown due dates rank last
    within their bucket.
    """
    candidates = [r for r in results if not r.is_archived]
    return sorted(
        sort_deadlines(candidates),
        key=lambda r: (
            urgency_rank(r.urgency),
            r.days_left if r.days_left is not None else float("inf"),
        ),
    )


# ============================================================================
# Caching
# ============================================================================


def snapshot_cache_key(
    ledger: Ledger,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> str:
    """Key for memoising results: ledger content plus the local day."""
    payload = {
        "deadlines": sorted(
            (d.model_dump(mode="json") for d in ledger.deadlines.values()),
            key=lambda d: d["id"],
        ),
        "progress": [e.model_dump(mode="json") for e in ledger.progress],
        "statuses": [e.model_dump(mode="json") for e in ledger.statuses],
        "reviews": sorted(
            (r.model_dump(mode="json") for r in ledger.reviews.values()),
            key=lambda r: r["deadline_id"],
        ),
    }
    digest = hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf-8")).hexdigest()
    return f"{digest}:{local_today(now, tz).isoformat()}"
