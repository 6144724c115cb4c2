from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """Outbound event: {userId, type, title, message, relatedEntityId}."""

    user_id: str
    type: NotificationType
    title: str
    message: str
    related_entity_id: Optional[str] = None
    notification_id: Optional[int] = None
    created_at: Optional[datetime] = None
    is_read: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "userId": self.user_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "relatedEntityId": self.related_entity_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "isRead": self.is_read,
        }
