"""Reading progress tracking."""

from .progress import (
    ProgressTracker,
    get_progress_tracker,
    progress_at_start_of_day,
    progress_for_today,
)

__all__ = [
    "ProgressTracker",
    "get_progress_tracker",
    "progress_at_start_of_day",
    "progress_for_today",
]
