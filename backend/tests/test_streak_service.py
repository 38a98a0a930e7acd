"""
Tests for StreakService.

Tests cover:
1. Marking a date done
2. Unmarking a date
3. Toggle is its own inverse
4. Date validation
"""
import pytest

from backend.exceptions import ValidationException
from backend.services.streak_service import StreakService


class TestEvaluate:
    """Tests for evaluate function"""

    def test_marking_new_date_increments_streak(self):
        """Adding an absent date should add it, +1 streak, +10 points"""
        result = StreakService.evaluate(["2026-01-01"], 1, "2026-01-02")

        assert result.completed_dates == ["2026-01-01", "2026-01-02"]
        assert result.streak == 2
        assert result.points_delta == 10

    def test_unmarking_date_decrements_streak(self):
        """Removing a present date should remove it, -1 streak, -10 points"""
        result = StreakService.evaluate(["2026-01-01", "2026-01-02"], 2, "2026-01-01")

        assert result.completed_dates == ["2026-01-02"]
        assert result.streak == 1
        assert result.points_delta == -10

    def test_streak_floors_at_zero(self):
        """Unmarking with a zero streak should keep it at zero"""
        result = StreakService.evaluate(["2026-01-01"], 0, "2026-01-01")

        assert result.completed_dates == []
        assert result.streak == 0
        assert result.points_delta == -10

    def test_dates_need_not_be_contiguous(self):
        """Streak is a counter: far apart dates still increment it"""
        dates, streak = [], 0
        for day in ["2026-01-01", "2026-03-15", "2026-12-31"]:
            result = StreakService.evaluate(dates, streak, day)
            dates, streak = result.completed_dates, result.streak

        assert streak == 3

    def test_double_toggle_restores_dates_and_streak(self):
        """Toggling the same date twice should return to the original values"""
        original_dates = ["2026-02-01", "2026-02-03"]
        first = StreakService.evaluate(original_dates, 4, "2026-02-02")
        second = StreakService.evaluate(first.completed_dates, first.streak, "2026-02-02")

        assert sorted(second.completed_dates) == sorted(original_dates)
        assert second.streak == 4
        assert first.points_delta + second.points_delta == 0

    def test_input_is_not_mutated(self):
        """The caller's list should be left untouched"""
        dates = ["2026-01-01"]
        StreakService.evaluate(dates, 1, "2026-01-02")

        assert dates == ["2026-01-01"]

    def test_duplicate_input_dates_are_collapsed(self):
        result = StreakService.evaluate(["2026-01-01", "2026-01-01"], 1, "2026-01-02")

        assert result.completed_dates == ["2026-01-01", "2026-01-02"]

    def test_none_dates_treated_as_empty(self):
        result = StreakService.evaluate(None, None, "2026-01-01")

        assert result.completed_dates == ["2026-01-01"]
        assert result.streak == 1


class TestDateValidation:
    """Tests for normalize_date function"""

    @pytest.mark.parametrize("value", ["2026-13-01", "yesterday", "", "2026/01/01", None])
    def test_rejects_non_calendar_dates(self, value):
        with pytest.raises(ValidationException):
            StreakService.normalize_date(value)

    def test_accepts_iso_date(self):
        assert StreakService.normalize_date("2026-02-28") == "2026-02-28"
