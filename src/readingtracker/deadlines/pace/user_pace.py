"""User pace: typical daily throughput over a rolling window.

Pages (physical and ebook) and minutes (audio) are separate unit classes and
are never summed together.

The window is the ``PACE_WINDOW_DAYS`` calendar days ending on the local day
of the most recent counted progress entry in the unit class, not today, so a
reader who stopped a few days ago keeps the pace they actually read at.

Per deadline and day the activity is ``max(0, end_of_day - start_of_day)``.
A correction that lowers progress floors to zero instead of subtracting.
Entries flagged ``ignore_in_calcs`` reset the start-of-day baseline but never
count as activity themselves. An entry stamped at the deadline's own
``created_at`` is the starting point the book was added with, and is treated
the same way.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, timedelta, tzinfo
from typing import Optional, Sequence

from ..dates import local_date_of, parse_server_datetime
from ..db.schemas import (
    MS_PER_MINUTE,
    CalculationMethod,
    DeadlineRecord,
    PaceUnit,
    ProgressEntry,
)
from ..ledger import Ledger, counted_entries, entry_instant

logger = logging.getLogger(__name__)

PACE_WINDOW_DAYS = 14
MIN_ACTIVE_DAYS = 3
DEFAULT_READING_PACE = 25.0  # pages/day
DEFAULT_LISTENING_PACE = 30.0  # minutes/day


@dataclass(frozen=True)
class UserPaceData:
    """User pace for one unit class."""

    unit: PaceUnit
    average_pace: float  # pages/day or minutes/day, default when unreliable
    active_days_count: int
    is_reliable: bool
    calculation_method: CalculationMethod
    measured_pace: float = 0.0  # window average even when unreliable
    window_start: Optional[date] = None
    window_end: Optional[date] = None
    activity_days: dict[date, float] = field(default_factory=dict)


def default_pace_for(unit: PaceUnit) -> float:
    """Conservative fallback pace for a unit class."""
    return DEFAULT_LISTENING_PACE if unit is PaceUnit.MINUTES else DEFAULT_READING_PACE


def to_display_units(amount: float, unit: PaceUnit) -> float:
    """Convert a stored quantity to pages or minutes."""
    if unit is PaceUnit.MINUTES:
        return amount / MS_PER_MINUTE
    return float(amount)


def daily_deltas(
    deadline: DeadlineRecord,
    entries: Sequence[ProgressEntry],
    tz: Optional[tzinfo] = None,
) -> dict[date, float]:
    """Activity per local day for one deadline, in stored units.

    Args:
        deadline: Deadline the entries belong to
        entries: Its progress history, in any order
        tz: Local zone for day boundaries

    Returns:
        Mapping of day to positive activity; quiet days are absent
    """
    created = parse_server_datetime(deadline.created_at, tz)

    by_day: dict[date, list[ProgressEntry]] = defaultdict(list)
    timed = [e for e in entries if parse_server_datetime(e.created_at, tz) is not None]
    for entry in sorted(timed, key=entry_instant):
        by_day[local_date_of(entry.created_at, tz)].append(entry)

    deltas: dict[date, float] = {}
    end_of_previous_day = 0
    for day in sorted(by_day):
        # Ignored and baseline entries close the running segment and rebase
        # the next one; counted work before them is kept.
        total = 0
        start = end = end_of_previous_day
        for entry in by_day[day]:
            is_baseline = created is not None and entry_instant(entry) <= created
            if entry.ignore_in_calcs or is_baseline:
                total += max(0, end - start)
                start = entry.current_progress
            end = entry.current_progress

        total += max(0, end - start)
        if total > 0:
            deltas[day] = total
        end_of_previous_day = end

    return deltas


def _unit_deadlines(ledger: Ledger, unit: PaceUnit) -> list[DeadlineRecord]:
    return [d for d in ledger.deadlines.values() if d.format in unit.formats]


def _window_anchor(ledger: Ledger, deadlines: list[DeadlineRecord], tz) -> Optional[date]:
    """Local day of the most recent counted entry across deadlines."""
    latest = None
    for deadline in deadlines:
        for entry in counted_entries(ledger.progress_for(deadline.id)):
            if parse_server_datetime(entry.created_at, tz) is None:
                continue
            if latest is None or entry_instant(entry) > entry_instant(latest):
                latest = entry
    return local_date_of(latest.created_at, tz) if latest else None


def _window_totals(
    ledger: Ledger,
    deadlines: list[DeadlineRecord],
    window_start: date,
    window_end: date,
    tz: Optional[tzinfo],
) -> dict[date, float]:
    """Activity per day inside the window, summed across deadlines."""
    totals: dict[date, float] = defaultdict(float)
    for deadline in deadlines:
        for day, delta in daily_deltas(deadline, ledger.progress_for(deadline.id), tz).items():
            if window_start <= day <= window_end:
                totals[day] += delta
    return totals


def recent_activity_days(
    ledger: Ledger,
    unit: PaceUnit,
    tz: Optional[tzinfo] = None,
    window_days: int = PACE_WINDOW_DAYS,
) -> list[tuple[date, float]]:
    """Daily activity inside the rolling window, oldest first.

    Amounts are in pages or minutes.
    """
    deadlines = _unit_deadlines(ledger, unit)
    anchor = _window_anchor(ledger, deadlines, tz)
    if anchor is None:
        return []

    window_start = anchor - timedelta(days=window_days - 1)
    totals = _window_totals(ledger, deadlines, window_start, anchor, tz)
    return [(day, to_display_units(totals[day], unit)) for day in sorted(totals)]


def calculate_user_pace(
    ledger: Ledger,
    unit: PaceUnit = PaceUnit.PAGES,
    tz: Optional[tzinfo] = None,
    window_days: int = PACE_WINDOW_DAYS,
    min_active_days: int = MIN_ACTIVE_DAYS,
    default_pace: Optional[float] = None,
) -> UserPaceData:
    """Calculate the user's pace for one unit class.

    Args:
        ledger: Every deadline and entry of the user
        unit: Pages or minutes
        tz: Local zone for day boundaries
        window_days: Length of the rolling window
        min_active_days: Active days needed for a reliable figure
        default_pace: Fallback pace (default: per-unit constant)

    Returns:
        UserPaceData with ``recent_data`` or ``default_fallback`` method
    """
    if default_pace is None:
        default_pace = default_pace_for(unit)

    deadlines = _unit_deadlines(ledger, unit)
    window_end = _window_anchor(ledger, deadlines, tz)
    window_start = None
    active: dict[date, float] = {}

    if window_end is not None:
        window_start = window_end - timedelta(days=window_days - 1)
        totals = _window_totals(ledger, deadlines, window_start, window_end, tz)
        active = {
            day: to_display_units(amount, unit)
            for day, amount in sorted(totals.items())
            if amount > 0
        }

    measured = sum(active.values()) / window_days if window_days > 0 else 0.0

    if len(active) < min_active_days:
        logger.debug(
            "Unreliable %s pace (%d active days), using default %s",
            unit.value,
            len(active),
            default_pace,
        )
        return UserPaceData(
            unit=unit,
            average_pace=default_pace,
            active_days_count=len(active),
            is_reliable=False,
            calculation_method=CalculationMethod.DEFAULT_FALLBACK,
            measured_pace=measured,
            window_start=window_start,
            window_end=window_end,
            activity_days=active,
        )

    return UserPaceData(
        unit=unit,
        average_pace=measured,
        active_days_count=len(active),
        is_reliable=True,
        calculation_method=CalculationMethod.RECENT_DATA,
        measured_pace=measured,
        window_start=window_start,
        window_end=window_end,
        activity_days=active,
    )


def calculate_user_listening_pace(
    ledger: Ledger,
    tz: Optional[tzinfo] = None,
    window_days: int = PACE_WINDOW_DAYS,
    min_active_days: int = MIN_ACTIVE_DAYS,
    default_pace: Optional[float] = None,
) -> UserPaceData:
    """Minutes/day pace over audio deadlines."""
    return calculate_user_pace(
        ledger, PaceUnit.MINUTES, tz, window_days, min_active_days, default_pace
    )
