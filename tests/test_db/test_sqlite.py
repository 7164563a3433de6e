"""Tests for SQLite database operations."""

from datetime import date, datetime, timezone
from uuid import UUID

import pytest

from readingtracker.deadlines.db.models import Deadline, ProgressLog, ReviewTracking, StatusLog
from readingtracker.deadlines.db.schemas import (
    DeadlineCreate,
    DeadlineStatus,
    ProgressEntryCreate,
    StatusEntryCreate,
)
from readingtracker.deadlines.db.sqlite import Database, DeadlineNotFoundError, get_db, reset_db

UTC = timezone.utc


class TestDatabaseCreation:
    """Tests for database initialization."""

    def test_database_creates_tables(self, db: Database):
        """Test that database creates all required tables."""
        with db.get_session() as session:
            # These queries should not raise
            session.query(Deadline).first()
            session.query(ProgressLog).first()
            session.query(StatusLog).first()
            session.query(ReviewTracking).first()

    def test_database_path_created(self, db: Database):
        """Test that database file is created."""
        assert db.db_path.exists()

    def test_global_instance_uses_env_path(self, db: Database, temp_db_path):
        """Test get_db honours DEADLINES_DB_PATH."""
        reset_db()
        assert get_db().db_path == temp_db_path
        reset_db()


class TestDeadlineCreation:
    """Tests for creating deadlines."""

    def test_create_deadline(self, db: Database, sample_deadline_data: DeadlineCreate):
        """Test creating a deadline."""
        deadline = db.create_deadline(sample_deadline_data)

        assert deadline.title == "The Left Hand of Darkness"
        assert deadline.total_quantity == 300
        assert deadline.deadline_date == "2025-06-25"
        assert str(UUID(deadline.id)) == deadline.id

    def test_initial_status_entry(self, db: Database, created_deadline):
        """Test a status entry is created with the deadline."""
        statuses = db.get_status_entries(created_deadline.id)

        assert len(statuses) == 1
        assert statuses[0].status == DeadlineStatus.READING
        assert statuses[0].created_at == created_deadline.created_at

    def test_initial_progress_entry(self, db: Database):
        """Test starting progress is stored at the creation stamp."""
        deadline = db.create_deadline(
            DeadlineCreate(
                title="Halfway",
                total_quantity=200,
                deadline_date=date(2025, 7, 1),
                initial_progress=80,
            ),
            created_at=datetime(2025, 6, 1, 12, 0, tzinfo=UTC),
        )
        entries = db.get_progress_entries(deadline.id)

        assert len(entries) == 1
        assert entries[0].current_progress == 80
        assert entries[0].created_at == deadline.created_at

    def test_no_progress_entry_without_initial_progress(self, db: Database, created_deadline):
        assert db.get_progress_entries(created_deadline.id) == []

    def test_get_deadline(self, db: Database, created_deadline):
        assert db.get_deadline(created_deadline.id) == created_deadline
        assert db.get_deadline("missing") is None

    def test_get_all_ordered_by_due_date(self, db: Database):
        for title, due in [("Later", date(2025, 9, 1)), ("Sooner", date(2025, 7, 1))]:
            db.create_deadline(DeadlineCreate(title=title, total_quantity=100, deadline_date=due))

        assert [d.title for d in db.get_all_deadlines()] == ["Sooner", "Later"]

    def test_search(self, db: Database, created_deadline):
        assert db.search_deadlines("left hand")[0].id == created_deadline.id
        assert db.search_deadlines("Le Guin")[0].id == created_deadline.id
        assert db.search_deadlines("nothing like this") == []


class TestLedgerAppends:
    """Tests for append-only entries."""

    def test_add_progress_entry(self, db: Database, created_deadline):
        entry = db.add_progress_entry(
            ProgressEntryCreate(
                deadline_id=created_deadline.id,
                current_progress=42,
                created_at=datetime(2025, 6, 2, 8, 30, tzinfo=UTC),
            )
        )

        assert entry.id is not None
        assert entry.created_at == "2025-06-02T08:30:00+00:00"

    def test_naive_timestamp_stored_as_utc(self, db: Database, created_deadline):
        entry = db.add_progress_entry(
            ProgressEntryCreate(
                deadline_id=created_deadline.id,
                current_progress=42,
                created_at=datetime(2025, 6, 2, 8, 30),
            )
        )
        assert entry.created_at.endswith("+00:00")

    def test_append_to_unknown_deadline(self, db: Database):
        with pytest.raises(DeadlineNotFoundError):
            db.add_progress_entry(ProgressEntryCreate(deadline_id="missing", current_progress=1))
        with pytest.raises(DeadlineNotFoundError):
            db.add_status_entry(
                StatusEntryCreate(deadline_id="missing", status=DeadlineStatus.PAUSED)
            )

    def test_add_status_entry(self, db: Database, created_deadline):
        db.add_status_entry(
            StatusEntryCreate(deadline_id=created_deadline.id, status=DeadlineStatus.PAUSED)
        )
        statuses = [e.status for e in db.get_status_entries(created_deadline.id)]
        assert DeadlineStatus.PAUSED in statuses

    def test_upsert_review_tracking(self, db: Database, created_deadline):
        """Test review tracking is created once and then updated."""
        first = db.upsert_review_tracking(created_deadline.id, review_due_date="2025-07-01")
        second = db.upsert_review_tracking(created_deadline.id, all_reviews_complete=True)

        assert first.review_due_date == "2025-07-01"
        assert not first.all_reviews_complete
        assert second.review_due_date == "2025-07-01"
        assert second.all_reviews_complete


class TestLoadLedger:
    """Tests for loading a ledger snapshot."""

    def test_load_ledger(self, db: Database, created_deadline):
        db.add_progress_entry(
            ProgressEntryCreate(deadline_id=created_deadline.id, current_progress=75)
        )
        db.upsert_review_tracking(created_deadline.id, review_due_date="2025-07-01")

        ledger = db.load_ledger()

        assert len(ledger) == 1
        assert ledger.current_progress(created_deadline.id) == 75
        assert ledger.current_status(created_deadline.id) == DeadlineStatus.READING
        assert ledger.review_for(created_deadline.id).review_due_date == "2025-07-01"

    def test_empty_ledger(self, db: Database):
        ledger = db.load_ledger()
        assert len(ledger) == 0
        assert ledger.progress == []
