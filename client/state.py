"""
Client application state.

State is an immutable snapshot; every change goes through reduce(), a pure
function of (state, action). Habit and task toggles run the same
gamification rules as the server so the local view matches what will be
persisted.
"""
import logging
import threading
from dataclasses import dataclass, field, replace
from typing import Callable, List, Optional, Tuple

from backend.services.badge_service import BadgeService
from backend.services.points_service import PointsService
from backend.services.streak_service import StreakService

logger = logging.getLogger("habit_tracker.client.state")


@dataclass(frozen=True)
class AppState:
    user: Optional[dict] = None
    habits: Tuple[dict, ...] = ()
    tasks: Tuple[dict, ...] = ()

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def habit(self, habit_id) -> Optional[dict]:
        return next((h for h in self.habits if h["id"] == habit_id), None)

    def task(self, task_id) -> Optional[dict]:
        return next((t for t in self.tasks if t["id"] == task_id), None)


# ===== ACTIONS =====

@dataclass(frozen=True)
class DataLoaded:
    user: dict
    habits: Tuple[dict, ...] = ()
    tasks: Tuple[dict, ...] = ()


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class ProfileMerged:
    fields: dict = field(default_factory=dict)


@dataclass(frozen=True)
class HabitAdded:
    habit: dict


@dataclass(frozen=True)
class HabitUpdated:
    habit: dict


@dataclass(frozen=True)
class HabitToggled:
    habit_id: int
    date: str


@dataclass(frozen=True)
class HabitRemoved:
    habit_id: int


@dataclass(frozen=True)
class TaskAdded:
    task: dict


@dataclass(frozen=True)
class TaskUpdated:
    task: dict


@dataclass(frozen=True)
class TaskToggled:
    task_id: int


@dataclass(frozen=True)
class TaskRemoved:
    task_id: int


@dataclass(frozen=True)
class StateRestored:
    state: AppState


# ===== REDUCER =====

_badge_service = BadgeService()


def _with_points(state: AppState, delta: int) -> AppState:
    """Apply a point delta to the user and re-run badge evaluation"""
    if state.user is None:
        return state
    ledger = PointsService.apply_delta(state.user.get("points", 0), delta)
    user = {**state.user, "points": ledger.points, "level": ledger.level}
    return _with_badges(replace(state, user=user))


def _with_badges(state: AppState) -> AppState:
    if state.user is None:
        return state
    badges = _badge_service.evaluate(state.user, state.habits, state.tasks)
    if badges == list(state.user.get("badges") or []):
        return state
    return replace(state, user={**state.user, "badges": badges})


def _replace_item(items: Tuple[dict, ...], item: dict) -> Tuple[dict, ...]:
    return tuple({**i, **item} if i["id"] == item["id"] else i for i in items)


def reduce(state: AppState, action) -> AppState:
    """
    Compute the next state for an action.

    Unknown habit or task IDs leave the state unchanged.
    """
    if isinstance(action, DataLoaded):
        return AppState(user=dict(action.user), habits=tuple(action.habits), tasks=tuple(action.tasks))

    if isinstance(action, LoggedOut):
        return AppState()

    if isinstance(action, StateRestored):
        return action.state

    if isinstance(action, ProfileMerged):
        if state.user is None:
            return state
        user = {**state.user, **action.fields}
        if "points" in action.fields:
            user["points"] = max(0, user["points"] or 0)
            user["level"] = PointsService.level_for(user["points"])
        return replace(state, user=user)

    if isinstance(action, HabitAdded):
        return _with_badges(replace(state, habits=state.habits + (action.habit,)))

    if isinstance(action, HabitUpdated):
        return replace(state, habits=_replace_item(state.habits, action.habit))

    if isinstance(action, HabitRemoved):
        return replace(state, habits=tuple(h for h in state.habits if h["id"] != action.habit_id))

    if isinstance(action, HabitToggled):
        habit = state.habit(action.habit_id)
        if habit is None:
            return state
        result = StreakService.evaluate(habit.get("completedDates", []), habit.get("streak", 0), action.date)
        toggled = {**habit, "completedDates": result.completed_dates, "streak": result.streak}
        return _with_points(replace(state, habits=_replace_item(state.habits, toggled)), result.points_delta)

    if isinstance(action, TaskAdded):
        return replace(state, tasks=(action.task,) + state.tasks)

    if isinstance(action, TaskUpdated):
        return replace(state, tasks=_replace_item(state.tasks, action.task))

    if isinstance(action, TaskRemoved):
        return replace(state, tasks=tuple(t for t in state.tasks if t["id"] != action.task_id))

    if isinstance(action, TaskToggled):
        task = state.task(action.task_id)
        if task is None:
            return state
        result = PointsService.task_toggle(task.get("completed", False))
        toggled = {**task, "completed": result.completed}
        return _with_points(replace(state, tasks=_replace_item(state.tasks, toggled)), result.points_delta)

    raise TypeError(f"Unknown action: {type(action).__name__}")


class Store:
    """Holds the current AppState and notifies subscribers of every change"""

    def __init__(self, state: Optional[AppState] = None):
        self._state = state or AppState()
        self._listeners: List[Callable[[AppState], None]] = []
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action) -> AppState:
        with self._lock:
            self._state = reduce(self._state, action)
            state = self._state
        for listener in list(self._listeners):
            listener(state)
        return state

    def subscribe(self, listener: Callable[[AppState], None]) -> Callable[[], None]:
        """Register a listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe
