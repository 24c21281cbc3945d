"""Transient user notifications raised by the stages."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List

from backend.app.core.time import utc_now


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    created_at: datetime = field(default_factory=utc_now)


class Notifier:
    """Keeps the most recent notifications and forwards them to listeners."""

    def __init__(self, max_items: int = 20):
        self._items = deque(maxlen=max_items)
        self._listeners: List[Callable[[Notification], None]] = []

    def subscribe(self, listener: Callable[[Notification], None]) -> None:
        self._listeners.append(listener)

    def _push(self, level: str, message: str) -> Notification:
        notification = Notification(level=level, message=message)
        self._items.append(notification)
        for listener in self._listeners:
            listener(notification)
        return notification

    def success(self, message: str) -> Notification:
        return self._push("success", message)

    def error(self, message: str) -> Notification:
        return self._push("error", message)

    @property
    def items(self) -> List[Notification]:
        return list(self._items)

    @property
    def last(self) -> Notification | None:
        return self._items[-1] if self._items else None

    def errors(self) -> List[str]:
        return [item.message for item in self._items if item.level == "error"]

    def clear(self) -> None:
        self._items.clear()
