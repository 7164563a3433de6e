"""Tests for pace display strings."""

import math

from readingtracker.deadlines.db.schemas import (
    MS_PER_MINUTE,
    DeadlineFormat,
    PaceSentinel,
    PaceUnit,
)
from readingtracker.deadlines.pace import (
    RequiredPace,
    format_duration,
    format_pace_display,
    format_progress_display,
    format_required_pace_display,
    reading_estimate,
    unit_label,
)


class TestPaceDisplay:
    """Tests for per-day pace strings."""

    def test_pages(self):
        assert format_pace_display(25.4, DeadlineFormat.PHYSICAL) == "25 pages/day"

    def test_audio(self):
        assert format_pace_display(90, DeadlineFormat.AUDIO) == "1h 30m/day"
        assert format_pace_display(45, DeadlineFormat.AUDIO) == "45m/day"

    def test_non_finite(self):
        assert format_pace_display(math.inf, DeadlineFormat.EBOOK) == "-"
        assert format_pace_display(math.nan, DeadlineFormat.EBOOK) == "-"

    def test_duration(self):
        assert format_duration(59.6) == "1h 0m"
        assert format_duration(125) == "2h 5m"

    def test_unit_label(self):
        assert unit_label(DeadlineFormat.AUDIO) == "minutes"
        assert unit_label(DeadlineFormat.EBOOK) == "pages"


class TestRequiredPaceDisplay:
    """Tests for required pace strings, including sentinels."""

    def test_sentinels(self):
        fmt = DeadlineFormat.PHYSICAL
        satisfied = RequiredPace(PaceUnit.PAGES, 0, 3, sentinel=PaceSentinel.SATISFIED)
        impossible = RequiredPace(PaceUnit.PAGES, 10, 0, sentinel=PaceSentinel.IMPOSSIBLE)
        undefined = RequiredPace(PaceUnit.PAGES, 0, None, sentinel=PaceSentinel.UNDEFINED)

        assert format_required_pace_display(satisfied, fmt) == "Done"
        assert format_required_pace_display(impossible, fmt) == "Past due"
        assert format_required_pace_display(undefined, fmt) == "-"

    def test_less_than_a_page_a_day(self):
        required = RequiredPace(PaceUnit.PAGES, 5, 10, pace=0.5)
        assert format_required_pace_display(required, DeadlineFormat.PHYSICAL) == "1 page every 2 days"

    def test_just_under_a_page_a_day(self):
        """Test a pace that rounds to one day per page reads as per day."""
        required = RequiredPace(PaceUnit.PAGES, 8, 10, pace=0.8)
        assert format_required_pace_display(required, DeadlineFormat.PHYSICAL) == "1 page/day"

    def test_numeric(self):
        required = RequiredPace(PaceUnit.PAGES, 200, 10, pace=20.0)
        assert format_required_pace_display(required, DeadlineFormat.PHYSICAL) == "20 pages/day"


class TestProgressDisplay:
    """Tests for position strings and time estimates."""

    def test_audio_position(self):
        assert format_progress_display(DeadlineFormat.AUDIO, 90 * MS_PER_MINUTE) == "1h 30m"

    def test_page_position(self):
        assert format_progress_display(DeadlineFormat.PHYSICAL, 120) == "120"

    def test_reading_estimate(self):
        assert reading_estimate(DeadlineFormat.PHYSICAL, 100) == "About 3 hours of reading time"
        assert reading_estimate(DeadlineFormat.PHYSICAL, 30) == "About 1 hour of reading time"
        assert reading_estimate(DeadlineFormat.AUDIO, 90) == "About 1h 30m of listening time"
        assert reading_estimate(DeadlineFormat.PHYSICAL, 0) == ""
