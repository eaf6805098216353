"""
Notification Feed
=================

Bounded in-memory list of notices shown in the dashboard. Oldest
entries fall off once the feed is full.

Version: 0.1.0
"""

from collections import deque
from itertools import count

from shared.models.notification import FeedNotification, FeedType


class NotificationFeed:
    """In-process notification feed."""

    def __init__(self, max_size: int = 100) -> None:
        self._items: deque[FeedNotification] = deque(maxlen=max_size)
        self._ids = count(1)

    def push(self, type: FeedType, title: str, message: str) -> FeedNotification:
        notification = FeedNotification(
            id=next(self._ids),
            type=type,
            title=title,
            message=message,
        )
        self._items.append(notification)
        return notification

    def list(self, unread_only: bool = False) -> list[FeedNotification]:
        """Notifications, newest first."""
        items = reversed(self._items)
        if unread_only:
            return [n for n in items if not n.read]
        return list(items)

    def mark_read(self, notification_id: int) -> bool:
        """
        Mark one notification as read.

        Returns:
            False when the id is unknown
        """
        for notification in self._items:
            if notification.id == notification_id:
                notification.read = True
                return True
        return False

    def __len__(self) -> int:
        return len(self._items)
