"""
Habit repository - Data access layer for Habit model.
Every lookup is scoped by owner: a habit owned by someone else is
indistinguishable from a missing one.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from backend.models import Habit


class HabitRepository:
    """Repository for Habit data access"""

    @staticmethod
    def get_owned(db: Session, habit_id: int, user_id: int) -> Optional[Habit]:
        """Get habit by ID if it belongs to the user"""
        return db.query(Habit).filter(
            and_(
                Habit.id == habit_id,
                Habit.user_id == user_id
            )
        ).first()

    @staticmethod
    def get_all_for_user(db: Session, user_id: int) -> List[Habit]:
        """Get all habits of a user in creation order"""
        return db.query(Habit).filter(Habit.user_id == user_id).order_by(Habit.id).all()

    @staticmethod
    def create(db: Session, habit: Habit) -> Habit:
        """Create new habit"""
        db.add(habit)
        db.commit()
        db.refresh(habit)
        return habit

    @staticmethod
    def update(db: Session, habit: Habit) -> Habit:
        """Update existing habit"""
        db.commit()
        db.refresh(habit)
        return habit

    @staticmethod
    def delete(db: Session, habit: Habit) -> None:
        """Delete a habit"""
        db.delete(habit)
        db.commit()
