from __future__ import annotations

from typing import Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def create(self, notification: Notification) -> int:
        raise NotImplementedError

    def list_for_user(self, *, user_id: str, unread_only: bool = False, limit: int = 200) -> Sequence[Notification]:
        raise NotImplementedError

    def mark_read(self, *, user_id: str, notification_id: int) -> bool:
        raise NotImplementedError
