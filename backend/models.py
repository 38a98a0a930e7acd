from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime

from backend.database import Base
from backend.constants import (
    CATEGORY_PERSONAL, CATEGORY_WORK, FREQUENCY_DAILY, PRIORITY_MEDIUM
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)  # stored lowercase
    password_hash = Column(String, nullable=False)

    # Gamification counters
    points = Column(Integer, default=0)
    level = Column(Integer, default=1)   # always floor(points / 100) + 1
    streak = Column(Integer, default=0)  # legacy, per-habit streaks drive badges
    badges = Column(JSON, default=list)  # append-only list of badge ids

    # Profile
    bio = Column(String, default="")
    job_title = Column(String, default="")
    avatar_url = Column(String, default="")
    has_seen_onboarding = Column(Boolean, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    habits = relationship("Habit", back_populates="owner", cascade="all, delete-orphan")
    tasks = relationship("Task", back_populates="owner", cascade="all, delete-orphan")


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    category = Column(String, default=CATEGORY_PERSONAL)
    frequency = Column(String, default=FREQUENCY_DAILY)  # descriptive only
    completed_dates = Column(JSON, default=list)  # "YYYY-MM-DD" strings, unique
    streak = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="habits")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    completed = Column(Boolean, default=False)
    priority = Column(String, default=PRIORITY_MEDIUM)
    category = Column(String, default=CATEGORY_WORK)
    due_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    owner = relationship("User", back_populates="tasks")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    # Messages outlive their author; a missing author renders as a fallback identity
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    text = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    author = relationship("User")
