"""
Tests for the client reducer and store.
"""
import pytest

from client.state import (
    AppState, Store, reduce, DataLoaded, LoggedOut, ProfileMerged,
    HabitAdded, HabitUpdated, HabitToggled, HabitRemoved,
    TaskAdded, TaskToggled, TaskRemoved, StateRestored
)


def make_state(points=0, badges=None, habits=(), tasks=()):
    user = {"id": 1, "username": "alice", "points": points, "level": points // 100 + 1,
            "badges": badges or []}
    return AppState(user=user, habits=tuple(habits), tasks=tuple(tasks))


def habit(habit_id=10, dates=None, streak=0):
    return {"id": habit_id, "title": "Read", "completedDates": dates or [], "streak": streak}


def task(task_id=20, completed=False):
    return {"id": task_id, "title": "Report", "completed": completed}


class TestHabitToggled:
    def test_toggle_on_awards_points(self):
        state = reduce(make_state(habits=[habit()]), HabitToggled(10, "2026-01-01"))

        assert state.habit(10)["completedDates"] == ["2026-01-01"]
        assert state.habit(10)["streak"] == 1
        assert state.user["points"] == 10
        assert state.user["level"] == 1

    def test_toggle_off_takes_points(self):
        start = make_state(points=100, habits=[habit(dates=["2026-01-01"], streak=1)])
        state = reduce(start, HabitToggled(10, "2026-01-01"))

        assert state.habit(10)["completedDates"] == []
        assert state.user["points"] == 90
        assert state.user["level"] == 1

    def test_original_state_untouched(self):
        start = make_state(habits=[habit()])
        reduce(start, HabitToggled(10, "2026-01-01"))

        assert start.habit(10)["completedDates"] == []
        assert start.user["points"] == 0

    def test_unknown_habit_is_noop(self):
        start = make_state(habits=[habit()])

        assert reduce(start, HabitToggled(99, "2026-01-01")) is start

    def test_seventh_toggle_grants_week_warrior(self):
        state = make_state(habits=[habit(streak=6)], badges=["first_step"])
        state = reduce(state, HabitToggled(10, "2026-01-07"))

        assert state.user["badges"] == ["first_step", "week_warrior"]


class TestTaskToggled:
    def test_complete_awards_twenty(self):
        state = reduce(make_state(tasks=[task()]), TaskToggled(20))

        assert state.task(20)["completed"] is True
        assert state.user["points"] == 20

    def test_uncomplete_keeps_points(self):
        state = reduce(make_state(points=20, tasks=[task(completed=True)]), TaskToggled(20))

        assert state.task(20)["completed"] is False
        assert state.user["points"] == 20

    def test_crossing_five_hundred_grants_points_master(self):
        state = reduce(make_state(points=490, tasks=[task()]), TaskToggled(20))

        assert "points_master" in state.user["badges"]
        assert state.user["level"] == 6


class TestOtherActions:
    def test_data_loaded_replaces_everything(self):
        state = reduce(AppState(), DataLoaded(user={"id": 2, "points": 0}, habits=(habit(),)))

        assert state.is_authenticated
        assert state.user["id"] == 2
        assert len(state.habits) == 1

    def test_logged_out_clears_state(self):
        state = reduce(make_state(habits=[habit()]), LoggedOut())

        assert state == AppState()
        assert not state.is_authenticated

    def test_habit_added_grants_first_step(self):
        state = reduce(make_state(), HabitAdded(habit()))

        assert state.user["badges"] == ["first_step"]

    def test_habit_updated_merges_fields(self):
        state = reduce(make_state(habits=[habit()]), HabitUpdated({"id": 10, "streak": 3}))

        assert state.habit(10)["streak"] == 3
        assert state.habit(10)["title"] == "Read"

    def test_removals(self):
        state = make_state(habits=[habit()], tasks=[task()])
        state = reduce(reduce(state, HabitRemoved(10)), TaskRemoved(20))

        assert state.habits == ()
        assert state.tasks == ()

    def test_task_added_goes_first(self):
        state = reduce(make_state(tasks=[task(1)]), TaskAdded(task(2)))

        assert [t["id"] for t in state.tasks] == [2, 1]

    def test_profile_merge_recomputes_level(self):
        state = reduce(make_state(), ProfileMerged({"points": 350, "bio": "hi"}))

        assert state.user["level"] == 4
        assert state.user["bio"] == "hi"

    def test_state_restored(self):
        snapshot = make_state(points=5)

        assert reduce(make_state(points=50), StateRestored(snapshot)) is snapshot

    def test_unknown_action_raises(self):
        with pytest.raises(TypeError):
            reduce(AppState(), object())


class TestStore:
    def test_dispatch_notifies_subscribers(self):
        store = Store(make_state(tasks=[task()]))
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.dispatch(TaskToggled(20))
        unsubscribe()
        store.dispatch(TaskToggled(20))

        assert len(seen) == 1
        assert seen[0].user["points"] == 20
