"""Timezone-safe calendar date helpers."""

from .normalize import (
    calculate_local_days_left,
    is_date_only,
    local_date_of,
    local_timezone,
    local_today,
    normalize_server_date,
    parse_server_date_only,
    parse_server_datetime,
    resolve_timezone,
)

__all__ = [
    "calculate_local_days_left",
    "is_date_only",
    "local_date_of",
    "local_timezone",
    "local_today",
    "normalize_server_date",
    "parse_server_date_only",
    "parse_server_datetime",
    "resolve_timezone",
]
