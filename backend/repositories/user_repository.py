"""
User repository - Data access layer for User model.
Handles all database queries related to accounts and the leaderboard.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from backend.models import User


class UserRepository:
    """Repository for User data access"""

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email (emails are stored lowercase)"""
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_top_by_points(db: Session, limit: int) -> List[User]:
        """Get users ordered by points, highest first"""
        return db.query(User).order_by(User.points.desc(), User.id).limit(limit).all()

    @staticmethod
    def create(db: Session, user: User) -> User:
        """Create new user"""
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update(db: Session, user: User) -> User:
        """Update existing user"""
        db.commit()
        db.refresh(user)
        return user
