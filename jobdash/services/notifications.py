"""
JobDash - Transient outcome notifications.

Stores announce the outcome of each user-triggered operation ("Job
updated", "Error deleting resume", ...). A UI drains these as toasts;
headless callers can read `history` or just rely on the log.
"""
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Deque, List, Optional
import logging

logger = logging.getLogger("jobdash.notifications")

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass
class Notification:
    title: str
    description: str = ""
    variant: str = DEFAULT
    created_at: datetime = field(default_factory=datetime.now)


class Notifier:
    """Bounded history of notifications plus optional listeners."""

    def __init__(self, history_size: int = 50):
        self.history: Deque[Notification] = deque(maxlen=history_size)
        self._listeners: List[Callable[[Notification], None]] = []

    def add_listener(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def notify(self, title: str, description: str = "", variant: str = DEFAULT) -> Notification:
        notification = Notification(title=title, description=description, variant=variant)
        self.history.append(notification)
        if variant == DESTRUCTIVE:
            logger.warning(f"{title}: {description}")
        else:
            logger.info(f"{title}: {description}")
        for listener in self._listeners:
            listener(notification)
        return notification

    def success(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, DEFAULT)

    def error(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, DESTRUCTIVE)

    def latest(self) -> Optional[Notification]:
        return self.history[-1] if self.history else None

    def clear(self) -> None:
        self.history.clear()
