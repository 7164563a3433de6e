"""Date normalization for server-provided values.

Server values come in two shapes and must never be confused:

- Date-only strings (``YYYY-MM-DD``) such as ``deadline_date`` are floating
  calendar dates. They are taken literally and never pass through UTC, which
  would move them by a day for users west or east of Greenwich.
- Timestamps (``2025-09-16T10:30:00Z``) are instants. Naive ones are UTC.
  They are converted to the user's local zone before any calendar-day logic.

Day differences are computed on ``date`` objects, so daylight-saving shifts
cannot introduce an off-by-one. Every helper returns ``None`` for malformed
input instead of raising.
"""

import logging
import re
from datetime import date, datetime, time, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import tz as dateutil_tz

logger = logging.getLogger(__name__)

DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DateInput = Union[str, date, datetime, None]


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Look up an IANA zone name.

    Args:
        name: Zone name such as ``Europe/Berlin``. Empty means system local.

    Returns:
        The zone, or None if the name is unknown
    """
    if not name:
        return local_timezone()
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %s", name)
        return None


def local_timezone() -> tzinfo:
    """The system local zone, following its daylight-saving rules."""
    return dateutil_tz.tzlocal()


def is_date_only(value: DateInput) -> bool:
    """Check whether a value is a plain ``YYYY-MM-DD`` date."""
    if isinstance(value, datetime):
        return False
    if isinstance(value, date):
        return True
    return bool(value) and isinstance(value, str) and bool(DATE_ONLY_RE.match(value))


def parse_server_date_only(value: DateInput) -> Optional[date]:
    """Parse a date-only value as a floating calendar date.

    The literal year/month/day is kept. No timezone is involved.
    """
    if isinstance(value, datetime):
        return None
    if isinstance(value, date):
        return value
    if not is_date_only(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        # Right shape, impossible date (e.g. 2025-02-30)
        return None


def parse_server_datetime(value: DateInput, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Parse a timestamp and convert it to local wall-clock time.

    Args:
        value: ISO timestamp string or datetime. Naive values are UTC.
        tz: Local zone (default: system local)

    Returns:
        Aware datetime in ``tz``, or None if unparseable
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(tz or local_timezone())


def normalize_server_date(value: DateInput, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """Normalize either shape of server date to a local datetime.

    Date-only values become local midnight of that same calendar day.
    """
    tz = tz or local_timezone()
    if is_date_only(value):
        day = parse_server_date_only(value)
        if day is None:
            return None
        return datetime.combine(day, time.min, tzinfo=tz)
    return parse_server_datetime(value, tz)


def local_date_of(value: DateInput, tz: Optional[tzinfo] = None) -> Optional[date]:
    """Calendar day a server value falls on in local time."""
    normalized = normalize_server_date(value, tz)
    return normalized.date() if normalized else None


def local_today(now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> date:
    """Today's calendar date in the local zone.

    Args:
        now: Reference instant (default: current time). Naive values are UTC.
        tz: Local zone (default: system local)
    """
    tz = tz or local_timezone()
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(tz).date()


def calculate_local_days_left(
    value: DateInput,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Optional[int]:
    """Whole calendar days from local today to a target date.

    Positive means the date is in the future, negative that it has passed.

    Args:
        value: Target date, date-only or timestamp
        now: Reference instant (default: current time)
        tz: Local zone (default: system local)

    Returns:
        Day difference, or None when the date is unavailable
    """
    target = local_date_of(value, tz)
    if target is None:
        logger.debug("Days left unavailable for %r", value)
        return None
    return (target - local_today(now, tz)).days
