from fastapi import FastAPI, Depends, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import List, Optional
import logging
import os
from pathlib import Path

from backend.database import engine, get_db, Base
from backend import models  # Import all models to register them with Base
from backend.schemas import (
    RegisterRequest, LoginRequest, AuthResponse, UserResponse, ProfileUpdate,
    DataResponse, LeaderboardEntry, BadgeResponse,
    HabitCreate, HabitUpdate, HabitResponse, HabitToggleRequest, HabitToggleResponse,
    TaskCreate, TaskUpdate, TaskResponse, TaskToggleResponse,
    MessageCreate, MessageResponse,
    QuoteRequest, PlanRequest, CoachChatRequest, CoachTextResponse, HabitSuggestion
)
from backend.auth import get_current_user
from backend.exceptions import (
    ValidationException, UserNotFoundException, InvalidCredentialsException,
    HabitNotFoundException, TaskNotFoundException
)
from backend.services.user_service import UserService
from backend.services.habit_service import HabitService
from backend.services.task_service import TaskService
from backend.services.chat_service import ChatService
from backend.services.coach_service import CoachService
from backend.services.badge_service import BadgeService
from backend.constants import (
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV, CORS_ALLOWED_ORIGINS,
    DEFAULT_CHAT_LIMIT, MAX_CHAT_LIMIT
)

LOG_DIR = os.getenv("HABITS_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("HABITS_LOG_FILE", "app.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()  # Also log to console
    ]
)

logger = logging.getLogger("habit_tracker")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Habit Tracker API",
    description="Habits, tasks, points, badges and a community chat",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

coach_service = CoachService()


def get_coach_service() -> CoachService:
    return coach_service


@app.middleware("http")
async def log_and_secure(request: Request, call_next):
    # Path only: query strings may carry tokens
    logger.info(f"{request.method} {request.url.path}")
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-XSS-Protection"] = "1; mode=block"
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc.__class__.__name__}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"}
    )


@app.on_event("startup")
async def startup_event():
    logger.info(f"Habit Tracker API started. Logging to: {log_path}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Habit Tracker API")


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Habit Tracker API", "status": "active"}


# ===== AUTH ENDPOINTS =====

@app.post("/api/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    """Create an account and return a token"""
    try:
        token, user = UserService(db).register(data)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"token": token, "user": user}


@app.post("/api/auth/login", response_model=AuthResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a token"""
    try:
        token, user = UserService(db).login(data)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except UserNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidCredentialsException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"token": token, "user": user}


# ===== USER ENDPOINTS =====

@app.get("/api/data", response_model=DataResponse)
def get_data(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get the user's profile, habits and tasks"""
    return UserService(db).get_dashboard(user)


@app.put("/api/users/profile", response_model=UserResponse)
def update_profile(
    data: ProfileUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Merge supplied profile fields"""
    return UserService(db).update_profile(user, data)


@app.get("/api/leaderboard", response_model=List[LeaderboardEntry])
def get_leaderboard(db: Session = Depends(get_db)):
    """Top users by points (public fields only)"""
    return UserService(db).get_leaderboard()


@app.get("/api/badges", response_model=List[BadgeResponse])
def get_badges():
    """Badge catalog"""
    return BadgeService().catalog()


# ===== HABIT ENDPOINTS =====

@app.get("/api/habits", response_model=List[HabitResponse])
def get_habits(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all habits of the user"""
    return HabitService(db).get_habits(user)


@app.post("/api/habits", response_model=HabitResponse, status_code=status.HTTP_201_CREATED)
def create_habit(
    habit: HabitCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new habit"""
    return HabitService(db).create_habit(user, habit)


@app.put("/api/habits/{habit_id}", response_model=HabitResponse)
def update_habit(
    habit_id: int,
    habit_update: HabitUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a habit"""
    try:
        return HabitService(db).update_habit(user, habit_id, habit_update)
    except HabitNotFoundException:
        raise HTTPException(status_code=404, detail="Habit not found")


@app.post("/api/habits/{habit_id}/toggle", response_model=HabitToggleResponse)
def toggle_habit(
    habit_id: int,
    data: HabitToggleRequest,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Mark or unmark a habit as done on a date"""
    try:
        habit, user = HabitService(db).toggle_completion(user, habit_id, data.date)
    except HabitNotFoundException:
        raise HTTPException(status_code=404, detail="Habit not found")
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"habit": habit, "user": user}


@app.delete("/api/habits/{habit_id}")
def delete_habit(
    habit_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a habit"""
    try:
        HabitService(db).delete_habit(user, habit_id)
    except HabitNotFoundException:
        raise HTTPException(status_code=404, detail="Habit not found")
    return {"success": True}


# ===== TASK ENDPOINTS =====

@app.get("/api/tasks", response_model=List[TaskResponse])
def get_tasks(user: models.User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Get all tasks of the user"""
    return TaskService(db).get_tasks(user)


@app.post("/api/tasks", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create a new task"""
    return TaskService(db).create_task(user, task)


@app.put("/api/tasks/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    task_update: TaskUpdate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update a task"""
    try:
        return TaskService(db).update_task(user, task_id, task_update)
    except TaskNotFoundException:
        raise HTTPException(status_code=404, detail="Task not found")


@app.post("/api/tasks/{task_id}/toggle", response_model=TaskToggleResponse)
def toggle_task(
    task_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Flip a task between done and not done"""
    try:
        task, user = TaskService(db).toggle_completion(user, task_id)
    except TaskNotFoundException:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"task": task, "user": user}


@app.delete("/api/tasks/{task_id}")
def delete_task(
    task_id: int,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a task"""
    try:
        TaskService(db).delete_task(user, task_id)
    except TaskNotFoundException:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"success": True}


# ===== CHAT ENDPOINTS =====

@app.get("/api/chat", response_model=List[MessageResponse])
def get_messages(
    limit: int = Query(DEFAULT_CHAT_LIMIT, ge=1, le=MAX_CHAT_LIMIT),
    after: Optional[int] = Query(None, ge=0),
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get the latest messages, oldest first (only newer than `after` if given)"""
    return ChatService(db).get_messages(limit, after)


@app.post("/api/chat", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def post_message(
    data: MessageCreate,
    user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Post a message to the community chat"""
    try:
        return ChatService(db).post_message(user, data.text)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))


# ===== AI COACH ENDPOINTS =====

@app.post("/api/coach/quote", response_model=CoachTextResponse)
def coach_quote(
    data: QuoteRequest,
    user: models.User = Depends(get_current_user),
    coach: CoachService = Depends(get_coach_service)
):
    """Motivational quote for the user"""
    context = data.context or f"{user.username}, level {user.level}, {user.points} points"
    return {"text": coach.motivational_quote(context)}


@app.post("/api/coach/plan", response_model=List[HabitSuggestion])
def coach_plan(
    data: PlanRequest,
    user: models.User = Depends(get_current_user),
    coach: CoachService = Depends(get_coach_service)
):
    """Suggest habits for a goal"""
    return coach.habit_plan(data.goal)


@app.post("/api/coach/chat", response_model=CoachTextResponse)
def coach_chat(
    data: CoachChatRequest,
    user: models.User = Depends(get_current_user),
    coach: CoachService = Depends(get_coach_service)
):
    """Ask the coach a question"""
    return {"text": coach.chat(data.message, data.history)}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=False)
