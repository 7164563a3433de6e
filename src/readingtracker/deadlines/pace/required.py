"""Required pace: the throughput a deadline needs to finish on time."""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional, Sequence

from ..dates import calculate_local_days_left, local_date_of, parse_server_date_only
from ..db.schemas import (
    DeadlineFormat,
    DeadlineRecord,
    PaceSentinel,
    PaceUnit,
    ProgressEntry,
)
from ..ledger import counted_entries, entry_instant
from .user_pace import to_display_units

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequiredPace:
    """Required pace for one deadline.

    Exactly one of ``pace`` and ``sentinel`` is set.
    """

    unit: PaceUnit
    remaining: float  # pages or minutes
    days_left: Optional[int]
    pace: Optional[float] = None
    sentinel: Optional[PaceSentinel] = None

    @property
    def is_impossible(self) -> bool:
        """Cannot be met: overdue with work left, or undefined."""
        return self.sentinel in (PaceSentinel.IMPOSSIBLE, PaceSentinel.UNDEFINED)

    @property
    def is_satisfied(self) -> bool:
        return self.sentinel is PaceSentinel.SATISFIED

    @property
    def effective_pace(self) -> float:
        """Numeric pace for comparisons. Satisfied is 0, impossible is inf."""
        if self.pace is not None:
            return self.pace
        return 0.0 if self.is_satisfied else math.inf


def clamp_progress(current_progress: float, total_quantity: float) -> float:
    """Progress bounded to ``[0, total_quantity]``."""
    if total_quantity <= 0:
        return 0
    return max(0, min(current_progress, total_quantity))


def remaining_quantity(total_quantity: float, current_progress: float) -> float:
    """Quantity left to consume, never negative."""
    if total_quantity <= 0:
        return 0
    return total_quantity - clamp_progress(current_progress, total_quantity)


def progress_percentage(current_progress: float, total_quantity: float) -> int:
    """Rounded percentage of the clamped progress.

    Only a finished deadline reports 100.
    """
    if total_quantity <= 0:
        return 0
    current = clamp_progress(current_progress, total_quantity)
    percent = round(current / total_quantity * 100)
    if current < total_quantity:
        return min(percent, 99)
    return percent


def required_pace_from(
    total_quantity: float,
    current_progress: float,
    days_left: Optional[int],
    format: DeadlineFormat = DeadlineFormat.PHYSICAL,
) -> RequiredPace:
    """Required pace from raw figures.

    Args:
        total_quantity: Pages, or milliseconds for audio
        current_progress: Cumulative progress in the same unit
        days_left: Calendar days until the due date, None if unknown
        format: Book format, decides the output unit

    Returns:
        RequiredPace in pages/day or minutes/day, or a sentinel
    """
    unit = format.unit
    remaining = to_display_units(remaining_quantity(total_quantity, current_progress), unit)

    if total_quantity <= 0 or days_left is None:
        logger.debug("Required pace undefined (total=%s, days_left=%s)", total_quantity, days_left)
        return RequiredPace(unit, remaining, days_left, sentinel=PaceSentinel.UNDEFINED)

    if remaining == 0:
        return RequiredPace(unit, remaining, days_left, sentinel=PaceSentinel.SATISFIED)

    if days_left <= 0:
        return RequiredPace(unit, remaining, days_left, sentinel=PaceSentinel.IMPOSSIBLE)

    return RequiredPace(unit, remaining, days_left, pace=remaining / days_left)


def calculate_required_pace(
    deadline: DeadlineRecord,
    current_progress: float,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> RequiredPace:
    """Required pace for a deadline as of ``now``."""
    days_left = calculate_local_days_left(deadline.deadline_date, now, tz)
    return required_pace_from(
        deadline.total_quantity, current_progress, days_left, deadline.format
    )


def required_pace_history(
    deadline: DeadlineRecord,
    entries: Sequence[ProgressEntry],
    tz: Optional[tzinfo] = None,
) -> list[tuple[date, RequiredPace]]:
    """Pace that was required at the end of each day with progress.

    Uses the last counted entry of every local day, oldest day first.
    Feeds the "minimum per day" chart.
    """
    due = parse_server_date_only(deadline.deadline_date)
    if due is None:
        return []

    last_of_day: dict[date, ProgressEntry] = {}
    by_day = defaultdict(list)
    for entry in counted_entries(entries):
        day = local_date_of(entry.created_at, tz)
        if day is not None:
            by_day[day].append(entry)
    for day, day_entries in by_day.items():
        last_of_day[day] = max(day_entries, key=lambda e: (entry_instant(e), e.current_progress))

    return [
        (
            day,
            required_pace_from(
                deadline.total_quantity,
                last_of_day[day].current_progress,
                (due - day).days,
                deadline.format,
            ),
        )
        for day in sorted(last_of_day)
    ]
