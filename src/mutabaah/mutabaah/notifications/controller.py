from __future__ import annotations

from flask import Flask, request

from ..common.http import current_actor, flag, json_ok, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/notifications", methods=["GET"], endpoint="my_notifications")
    @login_required
    def my_notifications():
        actor_id, _ = current_actor()
        items = container.notification_service.list_for_user(
            user_id=actor_id, unread_only=flag(request.args.get("unread", "0"))
        )
        return json_ok([n.to_dict() for n in items])

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="mark_notification_read")
    @login_required
    def mark_notification_read(notification_id: int):
        actor_id, _ = current_actor()
        container.notification_service.mark_read(user_id=actor_id, notification_id=notification_id)
        return json_ok({"id": notification_id, "isRead": True})
