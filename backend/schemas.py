from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from datetime import datetime, date
from typing import List, Optional

from backend.constants import (
    CATEGORY_PATTERN, FREQUENCY_PATTERN, PRIORITY_PATTERN, DATE_PATTERN,
    CATEGORY_PERSONAL, CATEGORY_WORK, FREQUENCY_DAILY, PRIORITY_MEDIUM,
    MAX_MESSAGE_LENGTH
)


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# Auth schemas
class RegisterRequest(CamelModel):
    # Presence and length are checked by UserService so the API answers 400
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    points: int = 0
    level: int = 1
    streak: int = 0
    badges: List[str] = []
    bio: str = ""
    job_title: str = ""
    avatar_url: str = ""
    has_seen_onboarding: bool = False
    created_at: Optional[datetime] = None


class AuthResponse(CamelModel):
    token: str
    user: UserResponse


class ProfileUpdate(CamelModel):
    username: Optional[str] = Field(None, min_length=2, max_length=100)
    bio: Optional[str] = Field(None, max_length=500)
    job_title: Optional[str] = Field(None, max_length=100)
    avatar_url: Optional[str] = Field(None, max_length=2000)
    has_seen_onboarding: Optional[bool] = None
    points: Optional[int] = None
    level: Optional[int] = None  # accepted for compatibility, always recomputed
    badges: Optional[List[str]] = None


class LeaderboardEntry(CamelModel):
    id: int
    username: str
    points: int
    level: int
    avatar_url: str = ""


class BadgeResponse(CamelModel):
    id: str
    name: str
    description: str
    icon: str


# Habit schemas
class HabitBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(default=CATEGORY_PERSONAL, pattern=CATEGORY_PATTERN)
    frequency: str = Field(default=FREQUENCY_DAILY, pattern=FREQUENCY_PATTERN)


class HabitCreate(HabitBase):
    pass


class HabitUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, pattern=CATEGORY_PATTERN)
    frequency: Optional[str] = Field(None, pattern=FREQUENCY_PATTERN)


class HabitToggleRequest(CamelModel):
    date: str = Field(..., pattern=DATE_PATTERN)


class HabitResponse(HabitBase):
    id: int
    user_id: int
    completed_dates: List[str] = []
    streak: int = 0
    created_at: Optional[datetime] = None


class HabitToggleResponse(CamelModel):
    habit: HabitResponse
    user: UserResponse


# Task schemas
class TaskBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    priority: str = Field(default=PRIORITY_MEDIUM, pattern=PRIORITY_PATTERN)
    category: str = Field(default=CATEGORY_WORK, pattern=CATEGORY_PATTERN)
    due_date: Optional[date] = None


class TaskCreate(TaskBase):
    pass


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    completed: Optional[bool] = None
    priority: Optional[str] = Field(None, pattern=PRIORITY_PATTERN)
    category: Optional[str] = Field(None, pattern=CATEGORY_PATTERN)
    due_date: Optional[date] = None


class TaskResponse(TaskBase):
    id: int
    user_id: int
    completed: bool = False
    created_at: Optional[datetime] = None


class TaskToggleResponse(CamelModel):
    task: TaskResponse
    user: UserResponse


class DataResponse(CamelModel):
    user: UserResponse
    habits: List[HabitResponse]
    tasks: List[TaskResponse]


# Chat schemas
class MessageCreate(CamelModel):
    # Length is checked by ChatService against the raw text
    text: Optional[str] = None


class MessageResponse(CamelModel):
    id: int
    text: str
    user_id: str
    username: str
    user_avatar: Optional[str] = None
    user_level: int = 0
    created_at: datetime


# Gamification engine results
class StreakResult(BaseModel):
    completed_dates: List[str]
    streak: int
    points_delta: int


class LedgerResult(BaseModel):
    points: int
    level: int


class TaskToggleResult(BaseModel):
    completed: bool
    points_delta: int


# AI coach schemas
class QuoteRequest(CamelModel):
    context: str = Field(default="", max_length=2000)


class PlanRequest(CamelModel):
    goal: str = Field(..., min_length=1, max_length=MAX_MESSAGE_LENGTH)


class CoachChatRequest(CamelModel):
    message: str = Field(..., min_length=1, max_length=2000)
    history: List[str] = []


class CoachTextResponse(CamelModel):
    text: str


class HabitSuggestion(CamelModel):
    title: str
    category: str = CATEGORY_PERSONAL
    frequency: str = FREQUENCY_DAILY
