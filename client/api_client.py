"""
HTTP client for the Habit Tracker API.
One method per endpoint; server errors become ApiError, an unreachable
server becomes NoConnectionError.
"""
import logging
from typing import List, Optional

import requests

logger = logging.getLogger("habit_tracker.client")

NO_CONNECTION_MESSAGE = "No connection to the server."


class ApiError(Exception):
    """Raised when the server answers with an error status"""
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class NoConnectionError(Exception):
    """Raised when the server cannot be reached at all"""
    def __init__(self):
        self.message = NO_CONNECTION_MESSAGE
        super().__init__(NO_CONNECTION_MESSAGE)


class ApiClient:
    """Thin wrapper over the REST endpoints"""

    def __init__(self, base_url: str = "http://localhost:8000", token: Optional[str] = None,
                 session=None, timeout: float = 10):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _request(self, method: str, path: str, json: dict = None, params: dict = None):
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = self.session.request(
                method,
                f"{self.base_url}{path}",
                json=json,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError:
            logger.warning(f"{method} {path}: server unreachable")
            raise NoConnectionError()

        if response.status_code >= 400:
            try:
                message = response.json().get("detail") or f"Server error: {response.status_code}"
            except ValueError:
                message = f"Server error: {response.status_code}"
            raise ApiError(response.status_code, message)
        return response.json()

    # ===== AUTH =====

    def register(self, username: str, email: str, password: str) -> dict:
        """Create an account; keeps the returned token"""
        data = self._request("POST", "/api/auth/register", json={
            "username": username, "email": email, "password": password
        })
        self.token = data["token"]
        return data

    def login(self, email: str, password: str) -> dict:
        """Sign in; keeps the returned token"""
        data = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = data["token"]
        return data

    def logout(self) -> None:
        self.token = None

    # ===== USER =====

    def get_data(self) -> dict:
        return self._request("GET", "/api/data")

    def update_profile(self, fields: dict) -> dict:
        return self._request("PUT", "/api/users/profile", json=fields)

    def get_leaderboard(self) -> List[dict]:
        return self._request("GET", "/api/leaderboard")

    def get_badges(self) -> List[dict]:
        return self._request("GET", "/api/badges")

    # ===== HABITS =====

    def create_habit(self, title: str, category: str = "Personal", frequency: str = "Daily") -> dict:
        return self._request("POST", "/api/habits", json={
            "title": title, "category": category, "frequency": frequency
        })

    def update_habit(self, habit_id: int, fields: dict) -> dict:
        return self._request("PUT", f"/api/habits/{habit_id}", json=fields)

    def toggle_habit(self, habit_id: int, date: str) -> dict:
        return self._request("POST", f"/api/habits/{habit_id}/toggle", json={"date": date})

    def delete_habit(self, habit_id: int) -> dict:
        return self._request("DELETE", f"/api/habits/{habit_id}")

    # ===== TASKS =====

    def create_task(self, title: str, priority: str = "Medium", category: str = "Work",
                    due_date: Optional[str] = None) -> dict:
        return self._request("POST", "/api/tasks", json={
            "title": title, "priority": priority, "category": category, "dueDate": due_date
        })

    def update_task(self, task_id: int, fields: dict) -> dict:
        return self._request("PUT", f"/api/tasks/{task_id}", json=fields)

    def toggle_task(self, task_id: int) -> dict:
        return self._request("POST", f"/api/tasks/{task_id}/toggle")

    def delete_task(self, task_id: int) -> dict:
        return self._request("DELETE", f"/api/tasks/{task_id}")

    # ===== CHAT =====

    def fetch_messages(self, limit: int = 50, after: Optional[int] = None) -> List[dict]:
        return self._request("GET", "/api/chat", params={"limit": limit, "after": after})

    def send_message(self, text: str) -> dict:
        return self._request("POST", "/api/chat", json={"text": text})

    # ===== AI COACH =====

    def coach_quote(self, context: str = "") -> str:
        return self._request("POST", "/api/coach/quote", json={"context": context})["text"]

    def coach_plan(self, goal: str) -> List[dict]:
        return self._request("POST", "/api/coach/plan", json={"goal": goal})

    def coach_chat(self, message: str, history: List[str] = None) -> str:
        return self._request("POST", "/api/coach/chat", json={
            "message": message, "history": history or []
        })["text"]
