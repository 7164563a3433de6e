"""SQLAlchemy ORM models for local SQLite database.

Tables:
- deadlines: Tracked books with a due date and quantity
- progress_entries: Append-only cumulative progress readings
- status_entries: Append-only lifecycle status changes
- review_tracking: Review obligations, one row per deadline
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .schemas import DeadlineFormat, DeadlineStatus


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


def generate_uuid() -> str:
    """Generate a UUID string for primary keys."""
    return str(uuid4())


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Deadline(Base):
    """Deadline model - a book to finish by a date."""

    __tablename__ = "deadlines"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    author: Mapped[Optional[str]] = mapped_column(String(500))
    format: Mapped[str] = mapped_column(
        String(20), default=DeadlineFormat.PHYSICAL.value, nullable=False
    )
    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)  # ms for audio
    deadline_date: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)

    # Relationships
    progress_entries: Mapped[list["ProgressLog"]] = relationship(
        "ProgressLog", back_populates="deadline", cascade="all, delete-orphan"
    )
    status_entries: Mapped[list["StatusLog"]] = relationship(
        "StatusLog", back_populates="deadline", cascade="all, delete-orphan"
    )
    review_tracking: Mapped[Optional["ReviewTracking"]] = relationship(
        "ReviewTracking", back_populates="deadline", uselist=False, cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Deadline(id={self.id}, title='{self.title}', due={self.deadline_date})>"


class ProgressLog(Base):
    """A cumulative progress reading. Rows are never updated."""

    __tablename__ = "progress_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    deadline_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("deadlines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    current_progress: Mapped[int] = mapped_column(Integer, nullable=False)
    ignore_in_calcs: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, index=True)

    deadline: Mapped["Deadline"] = relationship("Deadline", back_populates="progress_entries")

    def __repr__(self) -> str:
        return f"<ProgressLog(deadline_id={self.deadline_id}, progress={self.current_progress})>"


class StatusLog(Base):
    """A lifecycle status change. Rows are never updated."""

    __tablename__ = "status_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    deadline_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("deadlines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), default=DeadlineStatus.READING.value, nullable=False
    )
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso, index=True)

    deadline: Mapped["Deadline"] = relationship("Deadline", back_populates="status_entries")

    def __repr__(self) -> str:
        return f"<StatusLog(deadline_id={self.deadline_id}, status={self.status})>"


class ReviewTracking(Base):
    """Review obligations for a deadline in to_review."""

    __tablename__ = "review_tracking"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    deadline_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("deadlines.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    review_due_date: Mapped[Optional[str]] = mapped_column(String(10))
    needs_link_submission: Mapped[bool] = mapped_column(Boolean, default=False)
    all_reviews_complete: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[str] = mapped_column(String(32), default=utc_now_iso)
    updated_at: Mapped[str] = mapped_column(
        String(32), default=utc_now_iso, onupdate=utc_now_iso
    )

    deadline: Mapped["Deadline"] = relationship("Deadline", back_populates="review_tracking")
