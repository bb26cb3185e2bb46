from __future__ import annotations

from flask import Flask, request

from ..common.http import current_session, make_login_required, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.auth_service)
    service = container.notification_service

    @app.route("/api/notifications", endpoint="notifications")
    @login_required
    def notifications():
        user_session = current_session()
        if request.args.get("refresh") in ("1", "true"):
            service.refresh(user_session)
        return ok(
            notifications=[n.to_dict() for n in service.list(user_session)],
            unread_count=service.unread_count(user_session),
        )

    @app.route("/api/notifications/<notification_id>/read", methods=["POST"], endpoint="read_notification")
    @login_required
    def read_notification(notification_id: str):
        service.mark_read(current_session(), notification_id)
        return ok("Marked as read")

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="read_all_notifications")
    @login_required
    def read_all_notifications():
        changed = service.mark_all_read(current_session())
        return ok("All notifications marked as read", updated=changed)

    @app.route("/api/notifications/<notification_id>", methods=["DELETE"], endpoint="dismiss_notification")
    @login_required
    def dismiss_notification(notification_id: str):
        service.dismiss(current_session(), notification_id)
        return ok("Notification dismissed")

    @app.route("/api/notifications/settings", endpoint="notification_settings")
    @login_required
    def notification_settings():
        return ok(settings=service.settings(current_session()).to_dict())

    @app.route("/api/notifications/settings", methods=["PUT"], endpoint="update_notification_settings")
    @login_required
    def update_notification_settings():
        settings = service.update_settings(current_session(), request_data())
        return ok("Settings saved", settings=settings.to_dict())
