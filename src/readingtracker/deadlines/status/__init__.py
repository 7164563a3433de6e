"""Deadline lifecycle: state machine and validated appends."""

from .machine import (
    TERMINAL_STATUSES,
    TRANSITIONS,
    InvalidStatusTransition,
    allowed_transitions,
    can_transition,
    is_archived,
    is_terminal,
    validate_transition,
)
from .manager import StatusManager, get_status_manager

__all__ = [
    "TERMINAL_STATUSES",
    "TRANSITIONS",
    "InvalidStatusTransition",
    "allowed_transitions",
    "can_transition",
    "is_archived",
    "is_terminal",
    "validate_transition",
    "StatusManager",
    "get_status_manager",
]
