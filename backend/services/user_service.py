"""
User service.
Handles registration, login, profile merges, the dashboard payload and the leaderboard.
"""
import logging
from typing import List, Tuple
from sqlalchemy.orm import Session

from backend.auth import hash_password, verify_password, create_access_token
from backend.constants import MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH, LEADERBOARD_SIZE
from backend.exceptions import (
    ValidationException, EmailAlreadyRegisteredException,
    UserNotFoundException, InvalidCredentialsException
)
from backend.models import User
from backend.repositories.habit_repository import HabitRepository
from backend.repositories.task_repository import TaskRepository
from backend.repositories.user_repository import UserRepository
from backend.schemas import RegisterRequest, LoginRequest, ProfileUpdate
from backend.services.gamification_service import GamificationService
from backend.services.points_service import PointsService

logger = logging.getLogger("habit_tracker.users")

# Fields a client may overwrite directly through a profile merge
PLAIN_PROFILE_FIELDS = ("username", "bio", "job_title", "avatar_url")


class UserService:
    """Service for accounts and profiles"""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository()
        self.habit_repo = HabitRepository()
        self.task_repo = TaskRepository()
        self.gamification = GamificationService(db)

    def register(self, data: RegisterRequest) -> Tuple[str, User]:
        """
        Create an account and issue a token.

        Raises:
            ValidationException: Missing field or short password
            EmailAlreadyRegisteredException: Email already in use
        """
        username = (data.username or "").strip()
        email = (data.email or "").strip().lower()
        password = data.password or ""

        if not username or not email or not password:
            raise ValidationException("All fields are required")
        if len(username) < MIN_USERNAME_LENGTH:
            raise ValidationException(
                f"Username must be at least {MIN_USERNAME_LENGTH} characters", field="username"
            )
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationException(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
            )
        if self.user_repo.get_by_email(self.db, email):
            raise EmailAlreadyRegisteredException()

        user = User(
            username=username,
            email=email,
            password_hash=hash_password(password),
            points=0,
            level=1,
            streak=0,
            badges=[],
        )
        user = self.user_repo.create(self.db, user)
        logger.info(f"Registered user {user.id}")
        return create_access_token(user.id), user

    def login(self, data: LoginRequest) -> Tuple[str, User]:
        """
        Check credentials and issue a token.

        Raises:
            ValidationException: Missing email or password
            UserNotFoundException: Unknown email
            InvalidCredentialsException: Wrong password
        """
        email = (data.email or "").strip().lower()
        password = data.password or ""
        if not email or not password:
            raise ValidationException("Email and password are required")

        user = self.user_repo.get_by_email(self.db, email)
        if not user:
            raise UserNotFoundException()
        if not verify_password(password, user.password_hash):
            raise InvalidCredentialsException()

        return create_access_token(user.id), user

    def get_dashboard(self, user: User) -> dict:
        """User profile with all of their habits and tasks"""
        return {
            "user": user,
            "habits": self.habit_repo.get_all_for_user(self.db, user.id),
            "tasks": self.task_repo.get_all_for_user(self.db, user.id),
        }

    def update_profile(self, user: User, data: ProfileUpdate) -> User:
        """
        Merge supplied profile fields into the user.

        Omitted fields keep their values. Points are floored at zero and the
        level is recomputed from them; badges only grow; onboarding cannot
        be un-seen.
        """
        update_data = data.model_dump(exclude_unset=True)

        for key in PLAIN_PROFILE_FIELDS:
            if update_data.get(key) is not None:
                setattr(user, key, update_data[key])

        if update_data.get("has_seen_onboarding"):
            user.has_seen_onboarding = True

        if update_data.get("points") is not None:
            user.points = max(0, update_data["points"])
        user.level = PointsService.level_for(user.points)

        if update_data.get("badges") is not None:
            merged = list(user.badges or [])
            for badge in update_data["badges"]:
                if badge not in merged:
                    merged.append(badge)
            user.badges = merged

        return self.gamification.refresh_badges(user)

    def get_leaderboard(self, limit: int = LEADERBOARD_SIZE) -> List[User]:
        """Top users by points"""
        return self.user_repo.get_top_by_points(self.db, limit)
