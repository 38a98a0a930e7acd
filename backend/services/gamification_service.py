"""
Gamification service.
Runs the points ledger and badge evaluation for a user and persists the result.
"""
import logging
from sqlalchemy.orm import Session

from backend.models import User
from backend.repositories.habit_repository import HabitRepository
from backend.repositories.task_repository import TaskRepository
from backend.repositories.user_repository import UserRepository
from backend.services.badge_service import BadgeService
from backend.services.points_service import PointsService

logger = logging.getLogger("habit_tracker.gamification")


class GamificationService:
    """Applies point deltas and badge grants to a stored user"""

    def __init__(self, db: Session):
        self.db = db
        self.habit_repo = HabitRepository()
        self.task_repo = TaskRepository()
        self.user_repo = UserRepository()
        self.badge_service = BadgeService()

    def award(self, user: User, delta: int) -> User:
        """
        Apply a point delta, then re-evaluate badges.

        Pending changes in the session (e.g. a toggled habit) are committed
        together with the user.

        Args:
            user: Acting user
            delta: Signed points to apply

        Returns:
            Updated user
        """
        ledger = PointsService.apply_delta(user.points, delta)
        user.points = ledger.points
        user.level = ledger.level
        return self.refresh_badges(user)

    def refresh_badges(self, user: User) -> User:
        """Grant any badges the user's current state unlocks and save"""
        habits = self.habit_repo.get_all_for_user(self.db, user.id)
        tasks = self.task_repo.get_all_for_user(self.db, user.id)

        current = list(user.badges or [])
        badges = self.badge_service.evaluate(user, habits, tasks)
        if badges != current:
            new = [b for b in badges if b not in current]
            logger.info(f"User {user.id} unlocked badges: {', '.join(new)}")
            # Reassign so the JSON column is flagged dirty
            user.badges = badges

        return self.user_repo.update(self.db, user)
