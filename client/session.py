"""
Signed-in client session.

Ties the API client, the state store and the command queue together:
reads go straight to the server, mutations go through the command queue.
"""
import logging
from typing import Optional

from client.api_client import ApiClient, ApiError
from client.commands import Command, CommandQueue, ReconcilePolicy
from client.state import (
    AppState, Store, DataLoaded, LoggedOut, ProfileMerged,
    HabitAdded, HabitUpdated, HabitToggled, HabitRemoved,
    TaskAdded, TaskUpdated, TaskToggled, TaskRemoved
)

logger = logging.getLogger("habit_tracker.client.session")


class Session:
    """Client-side facade over one authenticated identity"""

    def __init__(self, api: ApiClient, store: Optional[Store] = None,
                 policy: ReconcilePolicy = ReconcilePolicy.REVERT):
        self.api = api
        self.store = store or Store()
        self.commands = CommandQueue(self.store, policy)

    @property
    def state(self) -> AppState:
        return self.store.state

    # ===== AUTH =====

    def register(self, username: str, email: str, password: str) -> AppState:
        data = self.api.register(username, email, password)
        return self.store.dispatch(DataLoaded(user=data["user"]))

    def login(self, email: str, password: str) -> AppState:
        self.api.login(email, password)
        return self.load()

    def load(self) -> AppState:
        """
        Replace local state with the server's.

        An expired or rejected token signs the session out.
        """
        try:
            data = self.api.get_data()
        except ApiError as e:
            if e.status_code in (401, 403):
                self.logout()
            raise
        return self.store.dispatch(DataLoaded(
            user=data["user"], habits=tuple(data["habits"]), tasks=tuple(data["tasks"])
        ))

    def logout(self) -> AppState:
        self.api.logout()
        return self.store.dispatch(LoggedOut())

    # ===== PROFILE =====

    def update_profile(self, **fields) -> Command:
        return self.commands.submit(
            "update profile",
            send=lambda: self.api.update_profile(fields),
            action=ProfileMerged(fields),
            confirm=lambda user: [ProfileMerged(user)],
        )

    def complete_onboarding(self) -> Command:
        return self.update_profile(hasSeenOnboarding=True)

    # ===== HABITS =====

    def add_habit(self, title: str, category: str = "Personal", frequency: str = "Daily") -> Command:
        return self.commands.submit(
            f"add habit {title!r}",
            send=lambda: self.api.create_habit(title, category, frequency),
            confirm=lambda habit: [HabitAdded(habit)],
        )

    def toggle_habit(self, habit_id: int, date: str) -> Command:
        return self.commands.submit(
            f"toggle habit {habit_id} on {date}",
            send=lambda: self.api.toggle_habit(habit_id, date),
            action=HabitToggled(habit_id, date),
            confirm=lambda r: [HabitUpdated(r["habit"]), ProfileMerged(r["user"])],
        )

    def delete_habit(self, habit_id: int) -> Command:
        return self.commands.submit(
            f"delete habit {habit_id}",
            send=lambda: self.api.delete_habit(habit_id),
            action=HabitRemoved(habit_id),
        )

    # ===== TASKS =====

    def add_task(self, title: str, priority: str = "Medium", category: str = "Work",
                 due_date: Optional[str] = None) -> Command:
        return self.commands.submit(
            f"add task {title!r}",
            send=lambda: self.api.create_task(title, priority, category, due_date),
            confirm=lambda task: [TaskAdded(task)],
        )

    def toggle_task(self, task_id: int) -> Command:
        return self.commands.submit(
            f"toggle task {task_id}",
            send=lambda: self.api.toggle_task(task_id),
            action=TaskToggled(task_id),
            confirm=lambda r: [TaskUpdated(r["task"]), ProfileMerged(r["user"])],
        )

    def delete_task(self, task_id: int) -> Command:
        return self.commands.submit(
            f"delete task {task_id}",
            send=lambda: self.api.delete_task(task_id),
            action=TaskRemoved(task_id),
        )
