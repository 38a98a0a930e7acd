"""
Community chat service.
Append-only message log, globally visible to every signed-in user.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from backend.constants import (
    MAX_MESSAGE_LENGTH, DEFAULT_CHAT_LIMIT, DELETED_USER_ID, DELETED_USER_NAME
)
from backend.exceptions import ValidationException
from backend.models import Message, User
from backend.repositories.message_repository import MessageRepository

logger = logging.getLogger("habit_tracker.chat")


class ChatService:
    """Service for the community chat"""

    def __init__(self, db: Session):
        self.db = db
        self.message_repo = MessageRepository()

    @staticmethod
    def to_response(message: Message) -> dict:
        """Flatten a message with its author's public identity"""
        author = message.author
        if author is None:
            return {
                "id": message.id,
                "text": message.text,
                "user_id": DELETED_USER_ID,
                "username": DELETED_USER_NAME,
                "user_avatar": None,
                "user_level": 0,
                "created_at": message.created_at,
            }
        return {
            "id": message.id,
            "text": message.text,
            "user_id": str(author.id),
            "username": author.username,
            "user_avatar": author.avatar_url or None,
            "user_level": author.level or 0,
            "created_at": message.created_at,
        }

    def get_messages(self, limit: int = DEFAULT_CHAT_LIMIT, after_id: Optional[int] = None) -> List[dict]:
        """Newest messages (optionally only those after a cursor), oldest first"""
        messages = self.message_repo.get_latest(self.db, limit, after_id)
        return [self.to_response(m) for m in messages]

    def post_message(self, user: User, text: Optional[str]) -> dict:
        """
        Append a message from the user.

        Raises:
            ValidationException: Empty text or longer than MAX_MESSAGE_LENGTH
        """
        if not text or not text.strip():
            raise ValidationException("Message is empty", field="text")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise ValidationException("Message is too long", field="text")

        message = Message(user_id=user.id, text=text.strip())
        message = self.message_repo.create(self.db, message)
        logger.info(f"Message {message.id} posted by user {user.id}")
        return self.to_response(message)
