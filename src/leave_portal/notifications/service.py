from __future__ import annotations

import logging
from typing import Iterable

from ..core.exceptions import NotFoundError, StoreError
from .model import PendingNotification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Write-only sink for workflows plus the read side polled by users."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def deliver(self, pending: Iterable[PendingNotification]) -> int:
        """Insert planned notifications; failures are logged and skipped.

        Called after the primary transaction has committed, so a failed insert
        never undoes the state change it describes. Returns the number delivered.
        """

        delivered = 0
        for item in pending:
            try:
                self._notifications.insert(user_id=item.user_id, message=item.message)
                delivered += 1
            except StoreError:
                logger.exception("Could not deliver notification to user %s", item.user_id)
        return delivered

    def list_for(self, *, user_id: int):
        return self._notifications.list_for(user_id=int(user_id))

    def unread_count(self, *, user_id: int) -> int:
        return self._notifications.unread_count(user_id=int(user_id))

    def mark_read(self, *, user_id: int, notification_id: int) -> None:
        if not self._notifications.mark_read(notification_id=int(notification_id), user_id=int(user_id)):
            raise NotFoundError("Notification not found or already read")

    def mark_all_read(self, *, user_id: int) -> int:
        return self._notifications.mark_all_read(user_id=int(user_id))
