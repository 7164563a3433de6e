"""Urgency classification.

An ordered decision list where the first matching rule wins:

1. past the due date                               -> overdue
2. required pace impossible, undefined or implausible -> impossible
3. required <= user pace x GOOD_FACTOR              -> good
4. required <= user pace x APPROACHING_FACTOR       -> approaching
5. anything else                                   -> urgent

The two factors are fixed hysteresis constants. They keep a deadline from
flapping between buckets on day-to-day noise in the user's pace.
"""

import math
from typing import Optional

from ..db.schemas import CalculationMethod, DeadlineFormat, PaceUnit, Urgency
from .required import RequiredPace

GOOD_FACTOR = 0.9
APPROACHING_FACTOR = 1.3

MAX_PAGES_PER_DAY = 500.0
MAX_MINUTES_PER_DAY = 1440.0  # 24 hours

# Most pressing first, for notification ranking
URGENCY_ORDER = (
    Urgency.OVERDUE,
    Urgency.IMPOSSIBLE,
    Urgency.URGENT,
    Urgency.APPROACHING,
    Urgency.GOOD,
)

# Rich styles per bucket
URGENCY_COLORS = {
    Urgency.OVERDUE: "bold red",
    Urgency.IMPOSSIBLE: "red",
    Urgency.URGENT: "dark_orange",
    Urgency.APPROACHING: "yellow",
    Urgency.GOOD: "green",
}


def max_daily_throughput(
    format: DeadlineFormat,
    max_pages_per_day: float = MAX_PAGES_PER_DAY,
    max_minutes_per_day: float = MAX_MINUTES_PER_DAY,
) -> float:
    """Highest plausible daily pace for a format."""
    if format.unit is PaceUnit.MINUTES:
        return max_minutes_per_day
    return max_pages_per_day


def classify_urgency(
    days_left: Optional[int],
    required: RequiredPace,
    user_pace: float,
    format: DeadlineFormat = DeadlineFormat.PHYSICAL,
    max_pages_per_day: float = MAX_PAGES_PER_DAY,
    max_minutes_per_day: float = MAX_MINUTES_PER_DAY,
) -> Urgency:
    """Classify a deadline into exactly one urgency bucket.

    Args:
        days_left: Calendar days until the due date, None if unknown
        required: Required pace for the deadline
        user_pace: User's pace in the same unit
        format: Book format, selects the plausibility cap
        max_pages_per_day: Cap for page formats
        max_minutes_per_day: Cap for audio

    Returns:
        The urgency bucket
    """
    if days_left is not None and days_left < 0:
        return Urgency.OVERDUE

    cap = max_daily_throughput(format, max_pages_per_day, max_minutes_per_day)
    if required.is_impossible or required.effective_pace > cap:
        return Urgency.IMPOSSIBLE

    if user_pace is None or not math.isfinite(user_pace):
        user_pace = 0.0

    needed = required.effective_pace
    if needed <= user_pace * GOOD_FACTOR:
        return Urgency.GOOD
    if needed <= user_pace * APPROACHING_FACTOR:
        return Urgency.APPROACHING
    return Urgency.URGENT


def urgency_rank(urgency: Urgency) -> int:
    """Position in notification priority, 0 is most pressing."""
    return URGENCY_ORDER.index(urgency)


def urgency_message(
    urgency: Urgency,
    method: CalculationMethod = CalculationMethod.RECENT_DATA,
    pace_display: str = "",
    required_display: str = "",
) -> str:
    """Short status line for a deadline card."""
    if urgency is Urgency.OVERDUE:
        return "Return or renew"
    if urgency is Urgency.IMPOSSIBLE:
        if method is CalculationMethod.DEFAULT_FALLBACK or not pace_display:
            return f"Required: {required_display}" if required_display else "Not enough time left"
        return f"Current: {pace_display} vs Required: {required_display}"
    if urgency is Urgency.URGENT:
        return "Tough timeline"
    if urgency is Urgency.APPROACHING:
        return "Pick up the pace"
    if method is CalculationMethod.DEFAULT_FALLBACK:
        return "On track (default pace)"
    return f"On track at {pace_display}" if pace_display else "You're on track"
