"""
Custom exceptions for the habit tracker application.
Provides specific exception types that routes translate into HTTP responses.
"""


class HabitTrackerException(Exception):
    """Base exception for habit tracker application"""
    pass


class ValidationException(HabitTrackerException):
    """Raised when user input fails a business rule"""
    def __init__(self, message: str, field: str = None):
        self.field = field
        self.message = message
        super().__init__(message)


class AuthenticationException(HabitTrackerException):
    """Raised when a bearer token is missing, invalid or expired"""
    def __init__(self, message: str = "Invalid token"):
        self.message = message
        super().__init__(message)


class EmailAlreadyRegisteredException(ValidationException):
    """Raised when registering with an email that already has an account"""
    def __init__(self):
        super().__init__("This email is already registered", field="email")


class UserNotFoundException(HabitTrackerException):
    """Raised when a login email matches no account"""
    def __init__(self):
        super().__init__("Invalid email or password")


class InvalidCredentialsException(HabitTrackerException):
    """Raised when the password does not match"""
    def __init__(self):
        super().__init__("Invalid email or password")


class HabitNotFoundException(HabitTrackerException):
    """Raised when a habit does not exist or belongs to someone else"""
    def __init__(self, habit_id: int):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")


class TaskNotFoundException(HabitTrackerException):
    """Raised when a task does not exist or belongs to someone else"""
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found")
