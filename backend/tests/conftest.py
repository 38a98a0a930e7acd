"""
Shared fixtures: an in-memory database, an API client wired to it, and
registered users with their auth headers.
"""
import os
import tempfile

os.environ.setdefault("HABITS_DATABASE_URL", "sqlite://")
os.environ.setdefault("HABITS_LOG_DIR", tempfile.gettempdir())
os.environ.setdefault("HABITS_JWT_SECRET", "test-secret")
os.environ.setdefault("GEMINI_API_KEY", "")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.database import Base, get_db
from backend.main import app, get_coach_service
from backend.models import User, Habit, Task
from backend.auth import hash_password


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def api(db_engine):
    """TestClient with get_db bound to the test database"""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = TestingSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.pop(get_db, None)
    app.dependency_overrides.pop(get_coach_service, None)


@pytest.fixture
def user(db_session):
    """A stored user with no points"""
    return create_user(db_session, "alice", "alice@example.com")


def create_user(db_session, username: str, email: str, password: str = "secret123", **fields) -> User:
    """Helper to store a user directly"""
    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        points=fields.pop("points", 0),
        level=fields.pop("level", 1),
        badges=fields.pop("badges", []),
        **fields
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def create_habit(db_session, user: User, title: str = "Read", **fields) -> Habit:
    """Helper to store a habit directly"""
    habit = Habit(
        user_id=user.id,
        title=title,
        completed_dates=fields.pop("completed_dates", []),
        streak=fields.pop("streak", 0),
        **fields
    )
    db_session.add(habit)
    db_session.commit()
    db_session.refresh(habit)
    return habit


def create_task(db_session, user: User, title: str = "Write report", **fields) -> Task:
    """Helper to store a task directly"""
    task = Task(user_id=user.id, title=title, completed=fields.pop("completed", False), **fields)
    db_session.add(task)
    db_session.commit()
    db_session.refresh(task)
    return task


def register(api, username: str = "alice", email: str = "alice@example.com",
             password: str = "secret123") -> dict:
    """Register through the API and return the response body"""
    response = api.post("/api/auth/register", json={
        "username": username, "email": email, "password": password
    })
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth(api):
    """Registered user's response body plus ready-made headers"""
    body = register(api)
    return {**body, "headers": {"Authorization": f"Bearer {body['token']}"}}


@pytest.fixture
def other_auth(api):
    """A second registered user"""
    body = register(api, "bob", "bob@example.com")
    return {**body, "headers": {"Authorization": f"Bearer {body['token']}"}}
