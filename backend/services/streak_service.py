"""
Habit streak evaluation.

A streak is a plain counter: marking a date done adds one, unmarking it
takes one away (never below zero). Dates are not checked for contiguity.
"""
from datetime import date
from typing import Iterable, List

from backend.constants import HABIT_TOGGLE_POINTS
from backend.exceptions import ValidationException
from backend.schemas import StreakResult


class StreakService:
    """Pure streak rules for a single habit toggle"""

    @staticmethod
    def normalize_date(value: str) -> str:
        """
        Validate a calendar date string.

        Args:
            value: Date in YYYY-MM-DD format

        Returns:
            The same date in canonical YYYY-MM-DD form

        Raises:
            ValidationException: If the value is not a calendar date
        """
        try:
            return date.fromisoformat(value).isoformat()
        except (TypeError, ValueError):
            raise ValidationException(
                f"Invalid date: {value!r}. Use YYYY-MM-DD", field="date"
            )

    @staticmethod
    def unique_dates(dates: Iterable[str]) -> List[str]:
        """Validate dates and drop duplicates, keeping first-seen order"""
        seen = []
        for value in dates or []:
            normalized = StreakService.normalize_date(value)
            if normalized not in seen:
                seen.append(normalized)
        return seen

    @staticmethod
    def evaluate(completed_dates: Iterable[str], streak: int, toggled_date: str) -> StreakResult:
        """
        Toggle one date in a habit's completion set.

        Args:
            completed_dates: Current completion dates
            streak: Current streak counter
            toggled_date: Date being marked or unmarked

        Returns:
            StreakResult with the new dates, streak and points delta
        """
        day = StreakService.normalize_date(toggled_date)
        dates = StreakService.unique_dates(completed_dates)
        current = streak or 0

        if day in dates:
            dates.remove(day)
            return StreakResult(
                completed_dates=dates,
                streak=max(0, current - 1),
                points_delta=-HABIT_TOGGLE_POINTS,
            )

        dates.append(day)
        return StreakResult(
            completed_dates=dates,
            streak=current + 1,
            points_delta=HABIT_TOGGLE_POINTS,
        )
