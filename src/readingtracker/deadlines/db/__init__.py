"""Database module for local SQLite storage."""

from .models import Deadline, ProgressLog, ReviewTracking, StatusLog
from .schemas import (
    CalculationMethod,
    DeadlineCreate,
    DeadlineFormat,
    DeadlineRecord,
    DeadlineStatus,
    PaceSentinel,
    PaceUnit,
    ProgressEntry,
    ProgressEntryCreate,
    ReviewTrackingRecord,
    StatusEntry,
    StatusEntryCreate,
    Urgency,
)
from .sqlite import Database, DeadlineNotFoundError, get_db, reset_db

__all__ = [
    "Deadline",
    "ProgressLog",
    "StatusLog",
    "ReviewTracking",
    "CalculationMethod",
    "DeadlineCreate",
    "DeadlineFormat",
    "DeadlineRecord",
    "DeadlineStatus",
    "PaceSentinel",
    "PaceUnit",
    "ProgressEntry",
    "ProgressEntryCreate",
    "ReviewTrackingRecord",
    "StatusEntry",
    "StatusEntryCreate",
    "Urgency",
    "Database",
    "DeadlineNotFoundError",
    "get_db",
    "reset_db",
]
