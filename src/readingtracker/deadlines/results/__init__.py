"""Calculated deadline results and dashboard ordering."""

from .aggregate import (
    calculate_all,
    calculate_deadline,
    calculate_paces,
    rank_for_notifications,
    separate_deadlines,
    snapshot_cache_key,
    sort_deadlines,
)
from .schemas import DeadlineCalculationResult, DeadlineGroups

__all__ = [
    "DeadlineCalculationResult",
    "DeadlineGroups",
    "calculate_all",
    "calculate_deadline",
    "calculate_paces",
    "rank_for_notifications",
    "separate_deadlines",
    "snapshot_cache_key",
    "sort_deadlines",
]
