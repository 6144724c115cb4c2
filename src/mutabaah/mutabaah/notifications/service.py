from __future__ import annotations

import logging
from typing import Iterable, Sequence

from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.exceptions import NotFoundError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def emit(self, events: Iterable[Notification]) -> int:
        """Persist notifications for delivery; returns how many were stored.

        Emission runs after the state change is committed, so a failure here
        is logged and the transition stands.
        """

        sent = 0
        for event in events:
            try:
                self._notifications.create(event)
                sent += 1
            except Exception:
                logger.exception(
                    "failed to emit %s notification for user %s (entity=%s)",
                    event.type.value, event.user_id, event.related_entity_id,
                )
        return sent

    def list_for_user(self, *, user_id: str, unread_only: bool = False) -> Sequence[Notification]:
        return self._notifications.list_for_user(user_id=str(user_id), unread_only=unread_only, limit=DEFAULT_LIST_LIMIT)

    def mark_read(self, *, user_id: str, notification_id: int) -> None:
        if not self._notifications.mark_read(user_id=str(user_id), notification_id=int(notification_id)):
            raise NotFoundError("Notifikasi tidak ditemukan")
