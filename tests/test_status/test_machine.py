"""Tests for the deadline lifecycle state machine."""

import pytest

from readingtracker.deadlines.db.schemas import DeadlineStatus as S
from readingtracker.deadlines.status import (
    TRANSITIONS,
    InvalidStatusTransition,
    allowed_transitions,
    can_transition,
    is_archived,
    is_terminal,
    validate_transition,
)


class TestTransitions:
    """Tests for allowed and rejected status changes."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.READING),
            (S.READING, S.PAUSED),
            (S.PAUSED, S.READING),
            (S.READING, S.TO_REVIEW),
            (S.TO_REVIEW, S.COMPLETE),
            (S.READING, S.COMPLETE),
            (S.READING, S.DID_NOT_FINISH),
            (S.PAUSED, S.DID_NOT_FINISH),
            (S.COMPLETE, S.READING),
            (S.DID_NOT_FINISH, S.READING),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (S.PENDING, S.PAUSED),
            (S.PENDING, S.TO_REVIEW),
            (S.PAUSED, S.TO_REVIEW),
            (S.TO_REVIEW, S.READING),
            (S.TO_REVIEW, S.PAUSED),
            (S.COMPLETE, S.PAUSED),
            (S.COMPLETE, S.PENDING),
            (S.READING, S.PENDING),
            (S.READING, S.READING),
        ],
    )
    def test_rejected(self, current, target):
        assert not can_transition(current, target)
        with pytest.raises(InvalidStatusTransition):
            validate_transition(current, target)

    def test_empty_history(self):
        """Test a new deadline may only start pending or reading."""
        assert can_transition(None, S.PENDING)
        assert can_transition(None, S.READING)
        assert not can_transition(None, S.COMPLETE)

    def test_every_status_has_rules(self):
        assert set(TRANSITIONS) == set(S)

    def test_terminal_states_only_reactivate(self):
        """Test archived deadlines can only go back to reading."""
        assert allowed_transitions(S.COMPLETE) == frozenset({S.READING})
        assert allowed_transitions(S.DID_NOT_FINISH) == frozenset({S.READING})


class TestArchival:
    """Tests for terminal status helpers."""

    def test_terminal(self):
        assert is_terminal(S.COMPLETE)
        assert is_terminal(S.DID_NOT_FINISH)
        assert not is_terminal(S.TO_REVIEW)
        assert is_archived(S.COMPLETE)
        assert not is_archived(S.PAUSED)

    def test_error_message(self):
        """Test the error names both statuses."""
        error = InvalidStatusTransition(S.COMPLETE, S.PAUSED)

        assert isinstance(error, ValueError)
        assert "complete" in str(error)
        assert "paused" in str(error)
        assert "no status" in str(InvalidStatusTransition(None, S.COMPLETE))
