"""
Application constants and environment configuration.
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file (if present)
load_dotenv()

# ===== CONFIGURATION =====

DATABASE_URL = os.getenv("HABITS_DATABASE_URL", "sqlite:///./habits.db")

JWT_SECRET = os.getenv("HABITS_JWT_SECRET", "dev-secret-change-me")
JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7

DEFAULT_LOG_DIRECTORY_PROD = "/var/log/habit-tracker"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "HABITS_CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173"
    ).split(",")
    if origin.strip()
]

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

# ===== GAMIFICATION =====

HABIT_TOGGLE_POINTS = 10
TASK_COMPLETION_POINTS = 20
POINTS_PER_LEVEL = 100

BADGE_FIRST_STEP = "first_step"
BADGE_WEEK_WARRIOR = "week_warrior"
BADGE_POINTS_MASTER = "points_master"

WEEK_WARRIOR_STREAK = 7
POINTS_MASTER_THRESHOLD = 500

# ===== ENUMS =====

CATEGORY_WORK = "Work"
CATEGORY_STUDY = "Study"
CATEGORY_FITNESS = "Fitness"
CATEGORY_PERSONAL = "Personal"
CATEGORIES = (CATEGORY_WORK, CATEGORY_STUDY, CATEGORY_FITNESS, CATEGORY_PERSONAL)

FREQUENCY_DAILY = "Daily"
FREQUENCY_WEEKLY = "Weekly"
FREQUENCIES = (FREQUENCY_DAILY, FREQUENCY_WEEKLY)

PRIORITY_LOW = "Low"
PRIORITY_MEDIUM = "Medium"
PRIORITY_HIGH = "High"
PRIORITIES = (PRIORITY_LOW, PRIORITY_MEDIUM, PRIORITY_HIGH)

CATEGORY_PATTERN = r"^(Work|Study|Fitness|Personal)$"
FREQUENCY_PATTERN = r"^(Daily|Weekly)$"
PRIORITY_PATTERN = r"^(Low|Medium|High)$"
DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

# ===== AUTH / USERS =====

MIN_PASSWORD_LENGTH = 6
MIN_USERNAME_LENGTH = 2
LEADERBOARD_SIZE = 20

# ===== CHAT =====

MAX_MESSAGE_LENGTH = 500
DEFAULT_CHAT_LIMIT = 50
MAX_CHAT_LIMIT = 200
DELETED_USER_ID = "deleted"
DELETED_USER_NAME = "Deleted user"
CHAT_POLL_INTERVAL_SECONDS = 3

# ===== AI COACH =====

COACH_PLAN_SIZE = 3
FALLBACK_QUOTE = "Success is the sum of small efforts repeated day in and day out. Keep going!"
FALLBACK_QUOTE_EMPTY = "Today is a great day to move forward!"
FALLBACK_CHAT_REPLY = "Something went wrong on our side. Please try again later."
FALLBACK_CHAT_EMPTY = "Sorry, I can't answer right now."
