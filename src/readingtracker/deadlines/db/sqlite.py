"""SQLite database operations.

Handles database connection, session management and ledger access. Progress
and status entries are only ever inserted and listed; there are no update or
delete operations for them.
"""

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base, Deadline, ProgressLog, ReviewTracking, StatusLog
from .schemas import (
    DeadlineCreate,
    DeadlineRecord,
    ProgressEntry,
    ProgressEntryCreate,
    ReviewTrackingRecord,
    StatusEntry,
    StatusEntryCreate,
)

if TYPE_CHECKING:
    from ..ledger import Ledger

logger = logging.getLogger(__name__)


class DeadlineNotFoundError(ValueError):
    """Raised when an append references an unknown deadline."""

    def __init__(self, deadline_id: str):
        self.deadline_id = deadline_id
        super().__init__(f"Deadline not found: {deadline_id}")


def _timestamp(value: Optional[datetime]) -> str:
    """ISO timestamp for storage, defaulting to now (UTC)."""
    if value is None:
        return datetime.now(timezone.utc).isoformat()
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class Database:
    """Database connection and operations manager."""

    def __init__(self, db_path: Optional[str] = None):
        """Initialize database connection.

        Args:
            db_path: Path to SQLite database file. If None, uses
                     DEADLINES_DB_PATH env var or default location.
        """
        if db_path is None:
            db_path = os.environ.get(
                "DEADLINES_DB_PATH",
                str(Path.home() / ".readingtracker" / "deadlines.db"),
            )

        self.db_path = Path(db_path)
        self._is_memory = str(db_path) == ":memory:"

        if not self._is_memory:
            self._ensure_directory()

        # In-memory databases share one connection across sessions
        if self._is_memory:
            self.engine = create_engine(
                "sqlite:///:memory:",
                echo=False,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_engine(
                f"sqlite:///{self.db_path}",
                echo=False,
                connect_args={"check_same_thread": False},
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)

    def _ensure_directory(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def create_tables(self) -> None:
        """Create all database tables."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """Get a database session context manager."""
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ========================================================================
    # Deadline Operations
    # ========================================================================

    def create_deadline(
        self,
        data: DeadlineCreate,
        created_at: Optional[datetime] = None,
    ) -> DeadlineRecord:
        """Create a deadline with its initial status and progress.

        The initial entries share the deadline's ``created_at`` so pace
        calculations treat the starting progress as a baseline.
        """
        stamp = _timestamp(created_at)

        with self.get_session() as s:
            deadline = Deadline(
                title=data.title,
                author=data.author,
                format=data.format.value,
                total_quantity=data.total_quantity,
                deadline_date=data.deadline_date.isoformat(),
                created_at=stamp,
            )
            s.add(deadline)
            s.flush()

            s.add(StatusLog(
                deadline_id=deadline.id,
                status=data.initial_status.value,
                created_at=stamp,
            ))
            if data.initial_progress > 0:
                s.add(ProgressLog(
                    deadline_id=deadline.id,
                    current_progress=data.initial_progress,
                    created_at=stamp,
                ))
            s.flush()

            logger.info("Created deadline %s (%s)", deadline.id, deadline.title)
            return DeadlineRecord.model_validate(deadline)

    def get_deadline(self, deadline_id: str) -> Optional[DeadlineRecord]:
        """Get a deadline by ID."""
        with self.get_session() as s:
            deadline = s.get(Deadline, deadline_id)
            return DeadlineRecord.model_validate(deadline) if deadline else None

    def get_all_deadlines(self) -> list[DeadlineRecord]:
        """Get all deadlines, earliest due date first."""
        with self.get_session() as s:
            stmt = select(Deadline).order_by(Deadline.deadline_date.asc())
            return [DeadlineRecord.model_validate(d) for d in s.execute(stmt).scalars()]

    def search_deadlines(self, query: str, limit: int = 10) -> list[DeadlineRecord]:
        """Search deadlines by title or author."""
        with self.get_session() as s:
            pattern = f"%{query}%"
            stmt = (
                select(Deadline)
                .where(Deadline.title.ilike(pattern) | Deadline.author.ilike(pattern))
                .order_by(Deadline.deadline_date.asc())
                .limit(limit)
            )
            return [DeadlineRecord.model_validate(d) for d in s.execute(stmt).scalars()]

    def _require_deadline(self, s: Session, deadline_id: str) -> Deadline:
        deadline = s.get(Deadline, deadline_id)
        if deadline is None:
            raise DeadlineNotFoundError(deadline_id)
        return deadline

    # ========================================================================
    # Ledger Appends
    # ========================================================================

    def add_progress_entry(self, entry: ProgressEntryCreate) -> ProgressEntry:
        """Append a progress entry."""
        with self.get_session() as s:
            self._require_deadline(s, entry.deadline_id)
            row = ProgressLog(
                deadline_id=entry.deadline_id,
                current_progress=entry.current_progress,
                ignore_in_calcs=entry.ignore_in_calcs,
                created_at=_timestamp(entry.created_at),
            )
            s.add(row)
            s.flush()
            return ProgressEntry.model_validate(row)

    def add_status_entry(self, entry: StatusEntryCreate) -> StatusEntry:
        """Append a status entry. Transitions are validated by the caller."""
        with self.get_session() as s:
            self._require_deadline(s, entry.deadline_id)
            row = StatusLog(
                deadline_id=entry.deadline_id,
                status=entry.status.value,
                created_at=_timestamp(entry.created_at),
            )
            s.add(row)
            s.flush()
            return StatusEntry.model_validate(row)

    def upsert_review_tracking(
        self,
        deadline_id: str,
        review_due_date: Optional[str] = None,
        needs_link_submission: Optional[bool] = None,
        all_reviews_complete: Optional[bool] = None,
    ) -> ReviewTrackingRecord:
        """Create or update the review tracking row of a deadline."""
        with self.get_session() as s:
            self._require_deadline(s, deadline_id)
            row = s.execute(
                select(ReviewTracking).where(ReviewTracking.deadline_id == deadline_id)
            ).scalar_one_or_none()

            if row is None:
                row = ReviewTracking(deadline_id=deadline_id)
                s.add(row)

            if review_due_date is not None:
                row.review_due_date = review_due_date
            if needs_link_submission is not None:
                row.needs_link_submission = needs_link_submission
            if all_reviews_complete is not None:
                row.all_reviews_complete = all_reviews_complete

            s.flush()
            return ReviewTrackingRecord.model_validate(row)

    # ========================================================================
    # Ledger Reads
    # ========================================================================

    def get_progress_entries(self, deadline_id: str) -> list[ProgressEntry]:
        """List all progress entries for a deadline."""
        with self.get_session() as s:
            stmt = select(ProgressLog).where(ProgressLog.deadline_id == deadline_id)
            return [ProgressEntry.model_validate(r) for r in s.execute(stmt).scalars()]

    def get_status_entries(self, deadline_id: str) -> list[StatusEntry]:
        """List all status entries for a deadline."""
        with self.get_session() as s:
            stmt = select(StatusLog).where(StatusLog.deadline_id == deadline_id)
            return [StatusEntry.model_validate(r) for r in s.execute(stmt).scalars()]

    def get_review_tracking(self, deadline_id: str) -> Optional[ReviewTrackingRecord]:
        """Get the review tracking of a deadline, if any."""
        with self.get_session() as s:
            row = s.execute(
                select(ReviewTracking).where(ReviewTracking.deadline_id == deadline_id)
            ).scalar_one_or_none()
            return ReviewTrackingRecord.model_validate(row) if row else None

    def load_ledger(self) -> "Ledger":
        """Load every deadline and entry into an in-memory ledger snapshot."""
        from ..ledger import Ledger

        with self.get_session() as s:
            deadlines = [DeadlineRecord.model_validate(d) for d in s.execute(select(Deadline)).scalars()]
            progress = [ProgressEntry.model_validate(r) for r in s.execute(select(ProgressLog)).scalars()]
            statuses = [StatusEntry.model_validate(r) for r in s.execute(select(StatusLog)).scalars()]
            reviews = [
                ReviewTrackingRecord.model_validate(r)
                for r in s.execute(select(ReviewTracking)).scalars()
            ]

        return Ledger.from_records(deadlines, progress, statuses, reviews)


# Global database instance
_db: Optional[Database] = None


def get_db(db_path: Optional[str] = None) -> Database:
    """Get or create the global database instance."""
    global _db
    if _db is None:
        _db = Database(db_path)
        _db.create_tables()
    return _db


def reset_db() -> None:
    """Reset the global database instance. Used for testing."""
    global _db
    _db = None
