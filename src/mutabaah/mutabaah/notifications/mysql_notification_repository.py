from __future__ import annotations

from typing import Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, notification: Notification) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, type, title, message, related_entity_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (
                    str(notification.user_id),
                    notification.type.value,
                    notification.title,
                    notification.message,
                    notification.related_entity_id,
                ),
            )
            return int(cur.lastrowid)

    def list_for_user(self, *, user_id: str, unread_only: bool = False, limit: int = 200) -> Sequence[Notification]:
        where = "user_id=%s" + (" AND is_read=0" if unread_only else "")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT notification_id, user_id, type, title, message, related_entity_id, created_at, is_read
                FROM notifications
                WHERE {where}
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (str(user_id), int(limit)),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=str(r["user_id"]),
                    type=NotificationType(r["type"]),
                    title=r["title"],
                    message=r["message"],
                    related_entity_id=r.get("related_entity_id"),
                    created_at=r.get("created_at"),
                    is_read=bool(r.get("is_read")),
                )
                for r in fetchall(cur)
            ]

    def mark_read(self, *, user_id: str, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE notification_id=%s AND user_id=%s",
                (int(notification_id), str(user_id)),
            )
            return cur.rowcount > 0
