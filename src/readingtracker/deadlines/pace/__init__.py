"""Pace figures: user pace, required pace and urgency."""

from .display import (
    format_duration,
    format_pace_display,
    format_progress_display,
    format_required_pace_display,
    reading_estimate,
    unit_label,
)
from .required import (
    RequiredPace,
    calculate_required_pace,
    clamp_progress,
    progress_percentage,
    remaining_quantity,
    required_pace_from,
    required_pace_history,
)
from .urgency import (
    APPROACHING_FACTOR,
    GOOD_FACTOR,
    MAX_MINUTES_PER_DAY,
    MAX_PAGES_PER_DAY,
    URGENCY_COLORS,
    classify_urgency,
    max_daily_throughput,
    urgency_message,
    urgency_rank,
)
from .user_pace import (
    DEFAULT_LISTENING_PACE,
    DEFAULT_READING_PACE,
    MIN_ACTIVE_DAYS,
    PACE_WINDOW_DAYS,
    UserPaceData,
    calculate_user_listening_pace,
    calculate_user_pace,
    daily_deltas,
    default_pace_for,
    recent_activity_days,
    to_display_units,
)

__all__ = [
    # User pace
    "UserPaceData",
    "calculate_user_pace",
    "calculate_user_listening_pace",
    "daily_deltas",
    "default_pace_for",
    "recent_activity_days",
    "to_display_units",
    "PACE_WINDOW_DAYS",
    "MIN_ACTIVE_DAYS",
    "DEFAULT_READING_PACE",
    "DEFAULT_LISTENING_PACE",
    # Required pace
    "RequiredPace",
    "calculate_required_pace",
    "clamp_progress",
    "progress_percentage",
    "remaining_quantity",
    "required_pace_from",
    "required_pace_history",
    # Urgency
    "classify_urgency",
    "max_daily_throughput",
    "urgency_message",
    "urgency_rank",
    "GOOD_FACTOR",
    "APPROACHING_FACTOR",
    "MAX_PAGES_PER_DAY",
    "MAX_MINUTES_PER_DAY",
    "URGENCY_COLORS",
    # Display
    "format_duration",
    "format_pace_display",
    "format_progress_display",
    "format_required_pace_display",
    "reading_estimate",
    "unit_label",
]
