"""
Community chat feed.

ChatFeed delivers "new messages since cursor" to subscribers. The
transport is left to subclasses; PollingChatFeed refetches on a fixed
interval with APScheduler.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from backend.constants import CHAT_POLL_INTERVAL_SECONDS, DEFAULT_CHAT_LIMIT
from client.api_client import ApiClient, ApiError, NoConnectionError

logger = logging.getLogger("habit_tracker.client.chat")


class ChatFeed(ABC):
    """Tracks a message cursor and hands unseen messages to listeners"""

    def __init__(self, api: ApiClient, limit: int = DEFAULT_CHAT_LIMIT):
        self.api = api
        self.limit = limit
        self.cursor: Optional[int] = None
        self._listeners: List[Callable[[List[dict]], None]] = []

    def fetch_since(self, cursor: Optional[int]) -> List[dict]:
        """Messages newer than the cursor (the latest page if cursor is None)"""
        return self.api.fetch_messages(limit=self.limit, after=cursor)

    def subscribe(self, listener: Callable[[List[dict]], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def poll_once(self) -> List[dict]:
        """
        Fetch and deliver messages past the cursor.

        Connection and server errors are logged and yield no messages;
        the next poll tries again from the same cursor.
        """
        try:
            messages = self.fetch_since(self.cursor)
        except (ApiError, NoConnectionError) as e:
            logger.warning(f"Chat refresh failed: {e}")
            return []

        new = [m for m in messages if self.cursor is None or m["id"] > self.cursor]
        if not new:
            return []

        self.cursor = new[-1]["id"]
        for listener in list(self._listeners):
            listener(new)
        return new

    @abstractmethod
    def start(self) -> None:
        """Begin delivering new messages"""

    @abstractmethod
    def stop(self) -> None:
        """Stop delivering new messages"""


class PollingChatFeed(ChatFeed):
    """ChatFeed refreshed by a background interval job"""

    JOB_ID = "chat_poll"

    def __init__(self, api: ApiClient, interval: float = CHAT_POLL_INTERVAL_SECONDS,
                 limit: int = DEFAULT_CHAT_LIMIT, scheduler: BackgroundScheduler = None):
        super().__init__(api, limit)
        self.interval = interval
        # Injected schedulers keep running after stop()
        self._owns_scheduler = scheduler is None
        self.scheduler = scheduler or BackgroundScheduler()

    @property
    def running(self) -> bool:
        return self.scheduler.running and self.scheduler.get_job(self.JOB_ID) is not None

    def start(self) -> None:
        """Fetch immediately, then keep polling every `interval` seconds"""
        if self.running:
            return
        self.poll_once()
        self.scheduler.add_job(
            self.poll_once,
            IntervalTrigger(seconds=self.interval),
            id=self.JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info(f"Chat polling started every {self.interval}s")

    def stop(self) -> None:
        if self.scheduler.get_job(self.JOB_ID) is not None:
            self.scheduler.remove_job(self.JOB_ID)
        if self._owns_scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
        logger.info("Chat polling stopped")
