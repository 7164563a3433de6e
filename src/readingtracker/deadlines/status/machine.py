"""Deadline lifecycle transitions.

The machine only answers whether an append is allowed. It keeps no state:
the current status is always the latest entry of the status history.

``complete`` and ``did_not_finish`` are archival for display, but not
absorbing. Reactivation appends a later ``reading`` entry and leaves the
terminal entry in place.
"""

from typing import Optional

from ..db.schemas import DeadlineStatus

TERMINAL_STATUSES = frozenset({DeadlineStatus.COMPLETE, DeadlineStatus.DID_NOT_FINISH})

TRANSITIONS: dict[DeadlineStatus, frozenset[DeadlineStatus]] = {
    DeadlineStatus.PENDING: frozenset({
        DeadlineStatus.READING,
        DeadlineStatus.COMPLETE,
        DeadlineStatus.DID_NOT_FINISH,
    }),
    DeadlineStatus.READING: frozenset({
        DeadlineStatus.PAUSED,
        DeadlineStatus.TO_REVIEW,
        DeadlineStatus.COMPLETE,
        DeadlineStatus.DID_NOT_FINISH,
    }),
    DeadlineStatus.PAUSED: frozenset({
        DeadlineStatus.READING,
        DeadlineStatus.COMPLETE,
        DeadlineStatus.DID_NOT_FINISH,
    }),
    DeadlineStatus.TO_REVIEW: frozenset({
        DeadlineStatus.COMPLETE,
        DeadlineStatus.DID_NOT_FINISH,
    }),
    DeadlineStatus.COMPLETE: frozenset({DeadlineStatus.READING}),
    DeadlineStatus.DID_NOT_FINISH: frozenset({DeadlineStatus.READING}),
}


class InvalidStatusTransition(ValueError):
    """Raised when a status append would break the lifecycle."""

    def __init__(self, current: Optional[DeadlineStatus], target: DeadlineStatus):
        self.current = current
        self.target = target
        origin = current.value if current else "no status"
        super().__init__(f"Cannot change status from {origin} to {target.value}")


def is_terminal(status: DeadlineStatus) -> bool:
    """Check if a status is archival (complete or did not finish)."""
    return status in TERMINAL_STATUSES


def is_archived(status: DeadlineStatus) -> bool:
    return is_terminal(status)


def allowed_transitions(current: DeadlineStatus) -> frozenset[DeadlineStatus]:
    """Statuses that may be appended after ``current``."""
    return TRANSITIONS[current]


def can_transition(current: Optional[DeadlineStatus], target: DeadlineStatus) -> bool:
    """Check whether ``target`` may follow ``current``.

    An empty history (``current`` is None) accepts only the initial
    ``pending`` or ``reading`` entry.
    """
    if current is None:
        return target in (DeadlineStatus.PENDING, DeadlineStatus.READING)
    return target in TRANSITIONS[current]


def validate_transition(current: Optional[DeadlineStatus], target: DeadlineStatus) -> None:
    """Raise InvalidStatusTransition unless the append is allowed."""
    if not can_transition(current, target):
        raise InvalidStatusTransition(current, target)
