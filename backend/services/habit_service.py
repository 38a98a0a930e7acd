"""
Habit management service.
Handles owner-scoped CRUD and the gamified completion toggle.
"""
import logging
from typing import List, Tuple
from sqlalchemy.orm import Session

from backend.exceptions import HabitNotFoundException
from backend.models import Habit, User
from backend.repositories.habit_repository import HabitRepository
from backend.schemas import HabitCreate, HabitUpdate
from backend.services.gamification_service import GamificationService
from backend.services.streak_service import StreakService

logger = logging.getLogger("habit_tracker.habits")


class HabitService:
    """Service for habit management"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.gamification = GamificationService(db)

    def _get_owned(self, user: User, habit_id: int) -> Habit:
        habit = self.habit_repo.get_owned(self.db, habit_id, user.id)
        if not habit:
            raise HabitNotFoundException(habit_id)
        return habit

    def get_habits(self, user: User) -> List[Habit]:
        """Get all habits of the user"""
        return self.habit_repo.get_all_for_user(self.db, user.id)

    def create_habit(self, user: User, habit_data: HabitCreate) -> Habit:
        """Create a habit and grant any badges it unlocks"""
        habit = Habit(
            **habit_data.model_dump(),
            user_id=user.id,
            completed_dates=[],
            streak=0,
        )
        habit = self.habit_repo.create(self.db, habit)
        self.gamification.refresh_badges(user)
        self.db.refresh(habit)
        return habit

    def update_habit(self, user: User, habit_id: int, habit_update: HabitUpdate) -> Habit:
        """
        Edit a habit's title, category or frequency.

        Completion dates and the streak change only through toggle_completion.

        Raises:
            HabitNotFoundException: If the user does not own the habit
        """
        habit = self._get_owned(user, habit_id)

        update_data = habit_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            if value is not None:
                setattr(habit, key, value)

        return self.habit_repo.update(self.db, habit)

    def toggle_completion(self, user: User, habit_id: int, toggled_date: str) -> Tuple[Habit, User]:
        """
        Mark or unmark a habit as done on a date.

        Updates the habit's dates and streak, applies the points delta and
        re-evaluates badges in a single commit.

        Returns:
            Tuple of (updated habit, updated user)
        """
        habit = self._get_owned(user, habit_id)

        result = StreakService.evaluate(habit.completed_dates, habit.streak, toggled_date)
        habit.completed_dates = result.completed_dates
        habit.streak = result.streak

        user = self.gamification.award(user, result.points_delta)
        self.db.refresh(habit)
        logger.info(f"Habit {habit.id} toggled: streak={habit.streak}, delta={result.points_delta}")
        return habit, user

    def delete_habit(self, user: User, habit_id: int) -> None:
        """
        Permanently delete a habit.

        Raises:
            HabitNotFoundException: If the user does not own the habit
        """
        habit = self._get_owned(user, habit_id)
        self.habit_repo.delete(self.db, habit)
