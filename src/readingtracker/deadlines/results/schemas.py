"""Pydantic schemas for calculated deadline figures."""

from dataclasses import dataclass, field
from typing import Optional

from pydantic import BaseModel, Field

from ..db.schemas import (
    CalculationMethod,
    DeadlineFormat,
    DeadlineStatus,
    PaceSentinel,
    PaceUnit,
    Urgency,
)


class DeadlineCalculationResult(BaseModel):
    """Everything a card, list row or notification needs for one deadline.

    Quantities are stored units for ``current_progress`` and
    ``total_quantity``; ``remaining`` and both paces are in pages or minutes.
    """

    deadline_id: str
    title: str = ""
    format: DeadlineFormat = DeadlineFormat.PHYSICAL
    unit: PaceUnit = PaceUnit.PAGES
    deadline_date: Optional[str] = None
    created_at: Optional[str] = None

    # Progress
    current_progress: int = 0
    total_quantity: int = 0
    remaining: float = 0.0
    progress_percentage: int = Field(default=0, ge=0, le=100)

    # Pace
    days_left: Optional[int] = None
    required_pace: Optional[float] = None
    required_pace_sentinel: Optional[PaceSentinel] = None
    required_pace_display: str = "-"
    user_pace: float = 0.0
    user_pace_display: str = "-"
    pace_reliability: CalculationMethod = CalculationMethod.DEFAULT_FALLBACK
    pace_message: str = ""

    # Classification
    urgency: Urgency
    status: DeadlineStatus = DeadlineStatus.READING
    is_archived: bool = False
    review_days_left: Optional[int] = None

    model_config = {"frozen": True}

    @property
    def is_overdue(self) -> bool:
        return self.days_left is not None and self.days_left < 0

    @property
    def pace_is_reliable(self) -> bool:
        return self.pace_reliability is CalculationMethod.RECENT_DATA


@dataclass
class DeadlineGroups:
    """Deadlines split into the lists the dashboard shows."""

    active: list[DeadlineCalculationResult] = field(default_factory=list)
    overdue: list[DeadlineCalculationResult] = field(default_factory=list)
    pending: list[DeadlineCalculationResult] = field(default_factory=list)
    paused: list[DeadlineCalculationResult] = field(default_factory=list)
    to_review: list[DeadlineCalculationResult] = field(default_factory=list)
    archived: list[DeadlineCalculationResult] = field(default_factory=list)

    def __len__(self) -> int:
        return sum(
            len(group)
            for group in (
                self.active,
                self.overdue,
                self.pending,
                self.paused,
                self.to_review,
                self.archived,
            )
        )
