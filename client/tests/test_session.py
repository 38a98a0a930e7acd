"""
End-to-end tests: a client Session driving the real API.
"""
from datetime import date, timedelta

import pytest

from client.api_client import ApiClient, ApiError
from client.commands import CommandStatus
from client.session import Session


@pytest.fixture
def session(client_api):
    session = Session(client_api)
    session.register("alice", "alice@example.com", "secret123")
    return session


def days(count, start=date(2026, 1, 1)):
    return [(start + timedelta(days=i)).isoformat() for i in range(count)]


class TestAuthFlow:
    def test_register_signs_in(self, session):
        """Should start a signed-in session at zero points"""
        assert session.state.is_authenticated
        assert session.state.user["points"] == 0
        assert session.state.user["hasSeenOnboarding"] is False

    def test_login_loads_server_state(self, session, api):
        """Should load the stored habits and badges on login"""
        session.add_habit("Read")

        fresh = Session(ApiClient(base_url="http://testserver", session=api))
        fresh.login("alice@example.com", "secret123")

        assert [h["title"] for h in fresh.state.habits] == ["Read"]
        assert fresh.state.user["badges"] == ["first_step"]

    def test_rejected_token_signs_out(self, session):
        """Should sign out when the server rejects the token"""
        session.api.token = "not-a-token"

        with pytest.raises(ApiError):
            session.load()

        assert not session.state.is_authenticated
        assert not session.api.is_authenticated

    def test_onboarding_is_remembered(self, session):
        """Should persist the onboarding flag"""
        command = session.complete_onboarding()

        assert command.status is CommandStatus.CONFIRMED
        assert session.load().user["hasSeenOnboarding"] is True


class TestGamification:
    def test_week_of_habit_completions(self, session):
        """Should reach a 7-day streak and week_warrior on client and server alike"""
        habit_id = session.add_habit("Meditate").result["id"]

        for day in days(7):
            assert session.toggle_habit(habit_id, day).status is CommandStatus.CONFIRMED

        local = session.state
        server = session.load()
        assert local.user["points"] == server.user["points"] == 70
        assert server.habit(habit_id)["streak"] == 7
        assert server.user["badges"] == ["first_step", "week_warrior"]

    def test_points_master_awarded_once(self, session):
        """Should grant points_master exactly once past 500 points"""
        habit_id = session.add_habit("Run").result["id"]
        for day in days(7):
            session.toggle_habit(habit_id, day)

        task_ids = [session.add_task(f"Task {i}").result["id"] for i in range(22)]
        for task_id in task_ids:
            session.toggle_task(task_id)

        user = session.load().user
        assert user["points"] == 510
        assert user["level"] == 6
        assert user["badges"] == ["first_step", "week_warrior", "points_master"]

        # Un-completing keeps points and badges
        session.toggle_task(task_ids[0])
        user = session.load().user
        assert user["points"] == 510
        assert user["badges"].count("points_master") == 1

    def test_undo_habit_completion(self, session):
        """Should return the habit and points to their start after a double toggle"""
        habit_id = session.add_habit("Stretch").result["id"]
        session.toggle_habit(habit_id, "2026-02-01")
        session.toggle_habit(habit_id, "2026-02-01")

        state = session.load()
        assert state.habit(habit_id)["completedDates"] == []
        assert state.habit(habit_id)["streak"] == 0
        assert state.user["points"] == 0


class TestFailures:
    def test_missing_habit_reverts_local_change(self, session):
        """Should fail the command and revert for a missing habit"""
        command = session.toggle_habit(999, "2026-02-01")

        assert command.status is CommandStatus.FAILED
        assert command.error.status_code == 404
        assert session.state.user["points"] == 0

    def test_delete_is_confirmed(self, session):
        """Should remove the task locally and on the server"""
        task_id = session.add_task("Temp").result["id"]

        command = session.delete_task(task_id)

        assert command.status is CommandStatus.CONFIRMED
        assert session.state.tasks == ()
        assert session.load().tasks == ()
