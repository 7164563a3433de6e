"""Pydantic schemas for deadline ledger data.

These schemas define the records handed to the calculation engine and the
payloads accepted when appending new entries. Dates and timestamps are kept
as the ISO strings the persistence layer stores; the engine normalizes them
itself so a malformed value degrades instead of failing validation.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Audio quantities are stored in milliseconds
MS_PER_MINUTE = 60_000


class DeadlineFormat(str, Enum):
    """Physical format of the tracked book."""

    PHYSICAL = "physical"
    EBOOK = "ebook"
    AUDIO = "audio"

    @property
    def unit(self) -> "PaceUnit":
        """Unit class the format's pace is expressed in."""
        return PaceUnit.MINUTES if self is DeadlineFormat.AUDIO else PaceUnit.PAGES

    @property
    def is_audio(self) -> bool:
        return self is DeadlineFormat.AUDIO


class PaceUnit(str, Enum):
    """Unit class for pace figures. Pages and minutes never mix."""

    PAGES = "pages"
    MINUTES = "minutes"

    @property
    def formats(self) -> tuple[DeadlineFormat, ...]:
        if self is PaceUnit.MINUTES:
            return (DeadlineFormat.AUDIO,)
        return (DeadlineFormat.PHYSICAL, DeadlineFormat.EBOOK)


class DeadlineStatus(str, Enum):
    """Lifecycle status of a deadline."""

    PENDING = "pending"
    READING = "reading"
    PAUSED = "paused"
    TO_REVIEW = "to_review"
    COMPLETE = "complete"
    DID_NOT_FINISH = "did_not_finish"


class Urgency(str, Enum):
    """Discrete urgency bucket for a deadline."""

    OVERDUE = "overdue"
    IMPOSSIBLE = "impossible"
    URGENT = "urgent"
    APPROACHING = "approaching"
    GOOD = "good"


class CalculationMethod(str, Enum):
    """How a user pace figure was obtained."""

    RECENT_DATA = "recent_data"
    DEFAULT_FALLBACK = "default_fallback"


class PaceSentinel(str, Enum):
    """Explicit non-numeric outcomes of a required pace calculation."""

    IMPOSSIBLE = "impossible"  # due today or earlier with work remaining
    SATISFIED = "satisfied"  # nothing left to consume
    UNDEFINED = "undefined"  # degenerate quantity or unknown due date


def _to_iso(value):
    """Accept date/datetime objects where ISO strings are stored."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


# ============================================================================
# Ledger Records
# ============================================================================


class DeadlineRecord(BaseModel):
    """A tracked book with a due date and a quantity to consume."""

    id: str
    title: str = ""
    author: Optional[str] = None
    format: DeadlineFormat = DeadlineFormat.PHYSICAL
    total_quantity: int = Field(..., description="Pages, or milliseconds for audio")
    deadline_date: Optional[str] = Field(None, description="Calendar date YYYY-MM-DD")
    created_at: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("deadline_date", "created_at", mode="before")
    @classmethod
    def coerce_iso(cls, v):
        return _to_iso(v)


class ProgressEntry(BaseModel):
    """A cumulative progress reading. Never a delta."""

    id: Optional[str] = None
    deadline_id: str
    current_progress: int
    created_at: Optional[str] = None
    ignore_in_calcs: bool = False

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_iso(cls, v):
        return _to_iso(v)

    @field_validator("ignore_in_calcs", mode="before")
    @classmethod
    def none_is_counted(cls, v):
        """An absent flag means the entry counts."""
        return bool(v) if v is not None else False


class StatusEntry(BaseModel):
    """A lifecycle status change."""

    id: Optional[str] = None
    deadline_id: str
    status: DeadlineStatus
    created_at: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("created_at", mode="before")
    @classmethod
    def coerce_iso(cls, v):
        return _to_iso(v)


class ReviewTrackingRecord(BaseModel):
    """Review obligations attached to a deadline in to_review."""

    deadline_id: str
    review_due_date: Optional[str] = None
    needs_link_submission: bool = False
    all_reviews_complete: bool = False

    model_config = {"from_attributes": True, "frozen": True}

    @field_validator("review_due_date", mode="before")
    @classmethod
    def coerce_iso(cls, v):
        return _to_iso(v)


# ============================================================================
# Append Payloads
# ============================================================================


class DeadlineCreate(BaseModel):
    """Schema for creating a deadline."""

    title: str = Field(..., min_length=1, max_length=500)
    author: Optional[str] = Field(None, max_length=500)
    format: DeadlineFormat = DeadlineFormat.PHYSICAL
    total_quantity: int = Field(..., ge=1, description="Pages, or milliseconds for audio")
    deadline_date: date
    initial_status: DeadlineStatus = DeadlineStatus.READING
    initial_progress: int = Field(default=0, ge=0)

    @field_validator("initial_status")
    @classmethod
    def initial_status_is_open(cls, v: DeadlineStatus) -> DeadlineStatus:
        """Deadlines start either pending or reading."""
        if v not in (DeadlineStatus.PENDING, DeadlineStatus.READING):
            raise ValueError("initial status must be pending or reading")
        return v


class ProgressEntryCreate(BaseModel):
    """Schema for appending a progress entry."""

    deadline_id: str
    current_progress: int = Field(..., ge=0)
    ignore_in_calcs: bool = False
    created_at: Optional[datetime] = None  # defaults to now (UTC)


class StatusEntryCreate(BaseModel):
    """Schema for appending a status entry."""

    deadline_id: str
    status: DeadlineStatus
    created_at: Optional[datetime] = None  # defaults to now (UTC)
