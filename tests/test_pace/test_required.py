"""Tests for required pace and progress clamping."""

import math
from datetime import date, datetime, timezone

import pytest

from readingtracker.deadlines.db.schemas import (
    MS_PER_MINUTE,
    DeadlineFormat,
    PaceSentinel,
    PaceUnit,
)
from readingtracker.deadlines.pace import (
    calculate_required_pace,
    clamp_progress,
    progress_percentage,
    remaining_quantity,
    required_pace_from,
    required_pace_history,
)

UTC = timezone.utc
NOW = datetime(2025, 6, 15, 12, 0, tzinfo=UTC)


class TestRequiredPace:
    """Tests for the required pace decision order."""

    def test_numeric_pace(self):
        """Test remaining divided by days left."""
        required = required_pace_from(300, 100, 10)

        assert required.pace == pytest.approx(20.0)
        assert required.sentinel is None
        assert required.remaining == 200
        assert required.unit == PaceUnit.PAGES

    def test_fractional_pace_not_rounded(self):
        """Test the pace keeps its fraction."""
        assert required_pace_from(100, 0, 3).pace == pytest.approx(100 / 3)

    def test_satisfied(self):
        """Test nothing left to read is satisfied."""
        assert required_pace_from(300, 300, 10).sentinel == PaceSentinel.SATISFIED

    def test_satisfied_wins_over_past_due(self):
        """Test a finished book is satisfied even after its due date."""
        assert required_pace_from(300, 300, -2).sentinel == PaceSentinel.SATISFIED

    @pytest.mark.parametrize("days_left", [0, -1, -30])
    def test_impossible(self, days_left):
        """Test work left on or after the due date is impossible."""
        required = required_pace_from(300, 100, days_left)

        assert required.sentinel == PaceSentinel.IMPOSSIBLE
        assert required.pace is None
        assert required.is_impossible

    @pytest.mark.parametrize("total", [0, -5])
    def test_degenerate_quantity_undefined(self, total):
        """Test a non-positive total never divides."""
        required = required_pace_from(total, 0, 10)

        assert required.sentinel == PaceSentinel.UNDEFINED
        assert required.remaining == 0

    def test_unknown_due_date_undefined(self):
        """Test an unavailable due date is undefined."""
        assert required_pace_from(300, 10, None).sentinel == PaceSentinel.UNDEFINED

    def test_overshoot_clamped(self):
        """Test progress above the total counts as finished."""
        required = required_pace_from(300, 350, 5)

        assert required.sentinel == PaceSentinel.SATISFIED
        assert required.remaining == 0

    def test_negative_progress_clamped(self):
        """Test negative progress counts as zero."""
        assert required_pace_from(300, -10, 10).pace == pytest.approx(30.0)

    def test_audio_in_minutes(self):
        """Test audio milliseconds become minutes per day."""
        required = required_pace_from(600 * MS_PER_MINUTE, 0, 10, DeadlineFormat.AUDIO)

        assert required.unit == PaceUnit.MINUTES
        assert required.remaining == pytest.approx(600.0)
        assert required.pace == pytest.approx(60.0)

    def test_effective_pace(self):
        """Test sentinel values compare as 0 and infinity."""
        assert required_pace_from(300, 300, 5).effective_pace == 0
        assert math.isinf(required_pace_from(300, 0, 0).effective_pace)
        assert required_pace_from(300, 0, 10).effective_pace == pytest.approx(30.0)

    def test_from_deadline_record(self, make_deadline):
        """Test the record-based helper uses local days left."""
        deadline = make_deadline(total_quantity=300, deadline_date="2025-06-25")
        required = calculate_required_pace(deadline, 100, NOW, UTC)

        assert required.days_left == 10
        assert required.pace == pytest.approx(20.0)

    def test_from_deadline_with_bad_date(self, make_deadline):
        deadline = make_deadline(deadline_date="not-a-date")
        required = calculate_required_pace(deadline, 100, NOW, UTC)

        assert required.days_left is None
        assert required.sentinel == PaceSentinel.UNDEFINED


class TestClamp:
    """Tests for progress clamping and percentages."""

    def test_clamp_bounds(self):
        assert clamp_progress(-5, 100) == 0
        assert clamp_progress(50, 100) == 50
        assert clamp_progress(150, 100) == 100
        assert clamp_progress(10, 0) == 0

    def test_remaining_never_negative(self):
        assert remaining_quantity(100, 150) == 0
        assert remaining_quantity(100, 30) == 70

    def test_percentage(self):
        """Test percentages are rounded integers."""
        assert progress_percentage(150, 300) == 50
        assert progress_percentage(1, 3) == 33
        assert progress_percentage(10, 0) == 0

    def test_percentage_reaches_100_only_when_done(self):
        """Test unfinished work never shows as 100%."""
        assert progress_percentage(299, 300) == 99
        assert progress_percentage(300, 300) == 100
        assert progress_percentage(350, 300) == 100

    def test_percentage_monotonic_and_bounded(self):
        """Test percentage never decreases as progress grows and stays in range."""
        previous = -1
        for progress in range(-50, 400, 7):
            pct = progress_percentage(progress, 300)
            assert 0 <= pct <= 100
            assert pct >= previous
            previous = pct


class TestRequiredPaceHistory:
    """Tests for the per-day required pace series."""

    def test_last_entry_of_each_day(self, make_deadline, make_progress):
        """Test each day uses its final counted value."""
        deadline = make_deadline(id="d", total_quantity=300, deadline_date="2025-06-25")
        entries = [
            make_progress("d", 200, "2025-06-15T12:00:00+00:00"),
            make_progress("d", 100, "2025-06-10T09:00:00+00:00"),
            make_progress("d", 120, "2025-06-10T18:00:00+00:00"),
            make_progress("d", 900, "2025-06-12T12:00:00+00:00", ignore_in_calcs=True),
        ]
        history = required_pace_history(deadline, entries, UTC)

        assert [day for day, _ in history] == [date(2025, 6, 10), date(2025, 6, 15)]
        assert history[0][1].pace == pytest.approx(180 / 15)
        assert history[1][1].pace == pytest.approx(10.0)

    def test_unknown_due_date(self, make_deadline, make_progress):
        deadline = make_deadline(id="d", deadline_date=None)
        entries = [make_progress("d", 10, "2025-06-10T12:00:00+00:00")]
        assert required_pace_history(deadline, entries, UTC) == []
