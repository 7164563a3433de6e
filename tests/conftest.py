"""Pytest configuration and shared fixtures.

This module provides fixtures for testing the deadline engine, including
temporary databases, record factories and fixed reference instants.
"""

import os
import tempfile
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Generator, Optional
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from readingtracker.deadlines.config import reset_config
from readingtracker.deadlines.db.schemas import (
    DeadlineCreate,
    DeadlineFormat,
    DeadlineRecord,
    DeadlineStatus,
    ProgressEntry,
    StatusEntry,
)
from readingtracker.deadlines.db.sqlite import Database, reset_db

UTC = timezone.utc

# Noon UTC keeps the local day the same from UTC-11 to UTC+11
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture(scope="function")
def temp_db_path() -> Generator[Path, None, None]:
    """Create a temporary database file path."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)
    yield db_path
    # Cleanup
    if db_path.exists():
        db_path.unlink()


@pytest.fixture(scope="function")
def db(temp_db_path: Path) -> Generator[Database, None, None]:
    """Create a test database instance."""
    # Reset any global state
    reset_db()
    reset_config()

    os.environ["DEADLINES_DB_PATH"] = str(temp_db_path)

    database = Database(str(temp_db_path))
    database.create_tables()
    yield database

    # Cleanup
    reset_db()
    reset_config()
    if "DEADLINES_DB_PATH" in os.environ:
        del os.environ["DEADLINES_DB_PATH"]


@pytest.fixture
def memory_db() -> Database:
    """Create an in-memory database."""
    database = Database(":memory:")
    database.create_tables()
    return database


# ============================================================================
# Time Fixtures
# ============================================================================


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant: 2025-06-15 12:00 UTC."""
    return NOW


@pytest.fixture
def utc():
    return UTC


@pytest.fixture
def new_york():
    """A zone with daylight saving time."""
    return ZoneInfo("America/New_York")


# ============================================================================
# Record Factories
# ============================================================================


@pytest.fixture
def make_deadline() -> Callable[..., DeadlineRecord]:
    """Factory for deadline records."""

    def _make(
        total_quantity: int = 300,
        deadline_date: Optional[str] = "2025-06-25",
        format: DeadlineFormat = DeadlineFormat.PHYSICAL,
        created_at: Optional[str] = "2025-05-01T12:00:00+00:00",
        title: str = "Test Book",
        id: Optional[str] = None,
    ) -> DeadlineRecord:
        return DeadlineRecord(
            id=id or str(uuid4()),
            title=title,
            format=format,
            total_quantity=total_quantity,
            deadline_date=deadline_date,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def make_progress() -> Callable[..., ProgressEntry]:
    """Factory for progress entries."""

    def _make(
        deadline_id: str,
        current_progress: int,
        created_at: Optional[str],
        ignore_in_calcs: bool = False,
    ) -> ProgressEntry:
        return ProgressEntry(
            id=str(uuid4()),
            deadline_id=deadline_id,
            current_progress=current_progress,
            created_at=created_at,
            ignore_in_calcs=ignore_in_calcs,
        )

    return _make


@pytest.fixture
def make_status() -> Callable[..., StatusEntry]:
    """Factory for status entries."""

    def _make(
        deadline_id: str,
        status: DeadlineStatus,
        created_at: Optional[str],
    ) -> StatusEntry:
        return StatusEntry(
            id=str(uuid4()),
            deadline_id=deadline_id,
            status=status,
            created_at=created_at,
        )

    return _make


@pytest.fixture
def sample_deadline_data() -> DeadlineCreate:
    """Create sample deadline data for testing."""
    return DeadlineCreate(
        title="The Left Hand of Darkness",
        author="Ursula K. Le Guin",
        format=DeadlineFormat.PHYSICAL,
        total_quantity=300,
        deadline_date=date(2025, 6, 25),
    )


@pytest.fixture
def created_deadline(db: Database, sample_deadline_data: DeadlineCreate) -> DeadlineRecord:
    """Create and return a deadline in the database."""
    return db.create_deadline(
        sample_deadline_data,
        created_at=datetime(2025, 6, 1, 12, 0, tzinfo=UTC),
    )


# ============================================================================
# CLI Testing Fixtures
# ============================================================================


@pytest.fixture
def cli_runner():
    """Create a Typer CLI test runner."""
    from typer.testing import CliRunner
    return CliRunner()
