from __future__ import annotations

from typing import Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def insert(self, *, user_id: int, message: str) -> int:
        raise NotImplementedError

    def mark_read(self, *, notification_id: int, user_id: int) -> bool:
        raise NotImplementedError

    def mark_all_read(self, *, user_id: int) -> int:
        raise NotImplementedError

    def list_for(self, *, user_id: int, limit: int = 200) -> Sequence[Notification]:
        raise NotImplementedError

    def unread_count(self, *, user_id: int) -> int:
        raise NotImplementedError
