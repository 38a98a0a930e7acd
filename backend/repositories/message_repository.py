"""
Message repository - Data access layer for the community chat log.
"""
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload

from backend.models import Message


class MessageRepository:
    """Repository for Message data access"""

    @staticmethod
    def get_latest(db: Session, limit: int, after_id: Optional[int] = None) -> List[Message]:
        """
        Get the newest messages in chronological order.

        Args:
            db: Database session
            limit: Maximum number of messages
            after_id: Only messages with a greater ID (cursor)

        Returns:
            Messages, oldest first
        """
        query = db.query(Message).options(joinedload(Message.author))
        if after_id is not None:
            query = query.filter(Message.id > after_id)
        newest_first = query.order_by(Message.id.desc()).limit(limit).all()
        return list(reversed(newest_first))

    @staticmethod
    def create(db: Session, message: Message) -> Message:
        """Append a message to the log"""
        db.add(message)
        db.commit()
        db.refresh(message)
        return message
