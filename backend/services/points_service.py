"""
Points ledger.
Handles point deltas, the derived level and task completion rewards.
"""
from backend.constants import POINTS_PER_LEVEL, TASK_COMPLETION_POINTS
from backend.schemas import LedgerResult, TaskToggleResult


class PointsService:
    """Pure points and level rules"""

    @staticmethod
    def level_for(points: int) -> int:
        """
        Derive a level from points.

        Level 1 covers 0-99 points, level 2 covers 100-199, and so on.
        """
        return max(0, points or 0) // POINTS_PER_LEVEL + 1

    @staticmethod
    def apply_delta(points: int, delta: int) -> LedgerResult:
        """
        Apply a signed point delta.

        Args:
            points: Current cumulative points
            delta: Points to add (negative for penalties)

        Returns:
            LedgerResult with new points (never negative) and level
        """
        new_points = max(0, (points or 0) + delta)
        return LedgerResult(points=new_points, level=PointsService.level_for(new_points))

    @staticmethod
    def task_toggle(completed: bool) -> TaskToggleResult:
        """
        Flip a task's completion flag.

        Completing pays TASK_COMPLETION_POINTS; un-completing costs nothing.
        """
        new_completed = not completed
        delta = TASK_COMPLETION_POINTS if new_completed else 0
        return TaskToggleResult(completed=new_completed, points_delta=delta)
