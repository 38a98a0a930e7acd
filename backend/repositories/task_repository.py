"""
Task repository - Data access layer for Task model.
Handles all database queries related to tasks, always scoped by owner.
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_

from backend.models import Task


class TaskRepository:
    """Repository for Task data access"""

    @staticmethod
    def get_owned(db: Session, task_id: int, user_id: int) -> Optional[Task]:
        """Get task by ID if it belongs to the user"""
        return db.query(Task).filter(
            and_(
                Task.id == task_id,
                Task.user_id == user_id
            )
        ).first()

    @staticmethod
    def get_all_for_user(db: Session, user_id: int) -> List[Task]:
        """Get all tasks of a user, newest first"""
        return db.query(Task).filter(
            Task.user_id == user_id
        ).order_by(Task.created_at.desc(), Task.id.desc()).all()

    @staticmethod
    def create(db: Session, task: Task) -> Task:
        """Create new task"""
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def update(db: Session, task: Task) -> Task:
        """Update existing task"""
        db.commit()
        db.refresh(task)
        return task

    @staticmethod
    def delete(db: Session, task: Task) -> None:
        """Delete a task"""
        db.delete(task)
        db.commit()
