"""Human-readable pace and progress strings."""

import math

from ..db.schemas import MS_PER_MINUTE, DeadlineFormat, PaceSentinel, PaceUnit
from .required import RequiredPace

PAGES_PER_HOUR = 40  # reading-time estimate


def unit_label(format: DeadlineFormat) -> str:
    """Unit name for a format ('pages' or 'minutes')."""
    return format.unit.value


def format_duration(minutes: float) -> str:
    """Format minutes as ``1h 5m`` or ``45m``."""
    total = round(minutes)
    hours, mins = divmod(total, 60)
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def format_pace_display(pace: float, format: DeadlineFormat) -> str:
    """Format a pace figure with its per-day unit."""
    if pace is None or not math.isfinite(pace):
        return "-"
    if format.unit is PaceUnit.MINUTES:
        return f"{format_duration(pace)}/day"
    return f"{round(pace)} pages/day"


def format_required_pace_display(required: RequiredPace, format: DeadlineFormat) -> str:
    """Format a required pace, spelling out sentinels."""
    if required.sentinel is PaceSentinel.SATISFIED:
        return "Done"
    if required.sentinel is PaceSentinel.IMPOSSIBLE:
        return "Past due"
    if required.sentinel is PaceSentinel.UNDEFINED:
        return "-"

    pace = required.pace
    if format.unit is PaceUnit.PAGES and 0 < pace < 1:
        # Less than a page a day reads better as a frequency
        days_per_page = round(1 / pace)
        if days_per_page <= 1:
            return "1 page/day"
        return f"1 page every {days_per_page} days"
    return format_pace_display(pace, format)


def format_progress_display(format: DeadlineFormat, progress: float) -> str:
    """Format stored progress; audio milliseconds become ``Xh Ym``."""
    if format.is_audio:
        return format_duration(progress / MS_PER_MINUTE)
    return f"{round(progress)}"


def reading_estimate(format: DeadlineFormat, remaining: float) -> str:
    """Estimate of the time left to finish.

    Args:
        format: Book format
        remaining: Remaining pages or minutes

    Returns:
        Estimate sentence, empty when nothing is left
    """
    if remaining <= 0:
        return ""
    if format.is_audio:
        return f"About {format_duration(remaining)} of listening time"
    hours = math.ceil(remaining / PAGES_PER_HOUR)
    return f"About {hours} hour{'s' if hours != 1 else ''} of reading time"
