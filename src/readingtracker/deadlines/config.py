"""Configuration management for the deadline engine.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Calendar
    timezone_name: Optional[str]  # None = system local time

    # Pace
    default_reading_pace: float  # pages/day
    default_listening_pace: float  # minutes/day
    pace_window_days: int
    min_active_days: int

    # Plausibility caps
    max_pages_per_day: float
    max_minutes_per_day: float

    # Logging
    log_level: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "DEADLINES_DB_PATH",
            str(Path.home() / ".readingtracker" / "deadlines.db"),
        )
        db_path = Path(db_path_str).expanduser()

        return cls(
            db_path=db_path,
            timezone_name=os.environ.get("DEADLINES_TIMEZONE") or None,
            default_reading_pace=float(
                os.environ.get("DEADLINES_DEFAULT_READING_PACE", "25")
            ),
            default_listening_pace=float(
                os.environ.get("DEADLINES_DEFAULT_LISTENING_PACE", "30")
            ),
            pace_window_days=int(os.environ.get("DEADLINES_PACE_WINDOW_DAYS", "14")),
            min_active_days=int(os.environ.get("DEADLINES_MIN_ACTIVE_DAYS", "3")),
            max_pages_per_day=float(
                os.environ.get("DEADLINES_MAX_PAGES_PER_DAY", "500")
            ),
            max_minutes_per_day=float(
                os.environ.get("DEADLINES_MAX_MINUTES_PER_DAY", "1440")
            ),
            log_level=os.environ.get("DEADLINES_LOG_LEVEL", "WARNING").upper(),
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.pace_window_days < 1:
            errors.append("DEADLINES_PACE_WINDOW_DAYS must be at least 1")
        if self.min_active_days < 1:
            errors.append("DEADLINES_MIN_ACTIVE_DAYS must be at least 1")
        if self.default_reading_pace <= 0:
            errors.append("DEADLINES_DEFAULT_READING_PACE must be positive")
        if self.default_listening_pace <= 0:
            errors.append("DEADLINES_DEFAULT_LISTENING_PACE must be positive")
        if self.max_pages_per_day <= 0 or self.max_minutes_per_day <= 0:
            errors.append("Maximum daily throughput caps must be positive")

        if self.timezone_name:
            from .dates import resolve_timezone

            if resolve_timezone(self.timezone_name) is None:
                errors.append(f"Unknown timezone: {self.timezone_name}")

        # Check database directory is writable
        if not self.db_path.parent.exists():
            try:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
            except PermissionError:
                errors.append(f"Cannot create database directory: {self.db_path.parent}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
