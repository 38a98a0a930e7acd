"""
Task management service.
Handles owner-scoped CRUD and the completion toggle that awards points.
"""
import logging
from typing import List, Tuple
from sqlalchemy.orm import Session

from backend.exceptions import TaskNotFoundException
from backend.models import Task, User
from backend.repositories.task_repository import TaskRepository
from backend.schemas import TaskCreate, TaskUpdate
from backend.services.gamification_service import GamificationService
from backend.services.points_service import PointsService

logger = logging.getLogger("habit_tracker.tasks")


class TaskService:
    """Service for task management"""

    def __init__(self, db: Session):
        self.db = db
        self.task_repo = TaskRepository()
        self.gamification = GamificationService(db)

    def _get_owned(self, user: User, task_id: int) -> Task:
        task = self.task_repo.get_owned(self.db, task_id, user.id)
        if not task:
            raise TaskNotFoundException(task_id)
        return task

    def get_tasks(self, user: User) -> List[Task]:
        """Get all tasks of the user, newest first"""
        return self.task_repo.get_all_for_user(self.db, user.id)

    def create_task(self, user: User, task_data: TaskCreate) -> Task:
        """Create a new task"""
        task = Task(**task_data.model_dump(), user_id=user.id, completed=False)
        return self.task_repo.create(self.db, task)

    def update_task(self, user: User, task_id: int, task_update: TaskUpdate) -> Task:
        """
        Apply a partial update to a task.

        Plain field edits never touch points; use toggle_completion for that.

        Raises:
            TaskNotFoundException: If the user does not own the task
        """
        task = self._get_owned(user, task_id)

        update_data = task_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            # due_date may be cleared explicitly
            if value is not None or key == "due_date":
                setattr(task, key, value)

        return self.task_repo.update(self.db, task)

    def toggle_completion(self, user: User, task_id: int) -> Tuple[Task, User]:
        """
        Flip a task between done and not done.

        Returns:
            Tuple of (updated task, updated user)
        """
        task = self._get_owned(user, task_id)

        result = PointsService.task_toggle(task.completed)
        task.completed = result.completed

        user = self.gamification.award(user, result.points_delta)
        self.db.refresh(task)
        logger.info(f"Task {task.id} toggled: completed={task.completed}, delta={result.points_delta}")
        return task, user

    def delete_task(self, user: User, task_id: int) -> None:
        """
        Permanently delete a task.

        Raises:
            TaskNotFoundException: If the user does not own the task
        """
        task = self._get_owned(user, task_id)
        self.task_repo.delete(self.db, task)
