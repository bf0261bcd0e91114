from __future__ import annotations

from flask import Flask

from ..common.http import current_user_id, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", methods=["GET"], endpoint="notifications")
    @login_required
    def notifications():
        user_id = current_user_id()
        items = container.notification_service.list_for(user_id=user_id)
        return ok(
            unread=container.notification_service.unread_count(user_id=user_id),
            notifications=[
                {
                    "notification_id": n.notification_id,
                    "message": n.message,
                    "is_read": n.is_read,
                    "created_at": n.created_at.isoformat(sep=" ") if n.created_at else None,
                }
                for n in items
            ],
        )

    @app.route("/notifications/<int:notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: int):
        container.notification_service.mark_read(user_id=current_user_id(), notification_id=notification_id)
        return ok("Notification marked as read")

    @app.route("/notifications/read-all", methods=["POST"], endpoint="read_all_notifications")
    @login_required
    def read_all_notifications():
        count = container.notification_service.mark_all_read(user_id=current_user_id())
        return ok(f"{count} notifications marked as read", updated=count)
