from __future__ import annotations

from flask import Flask, request

from ..common.http import current_session, int_arg, make_login_required, ok, request_data
from ..container import Container
from .serializers import record_to_dict


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.auth_service)

    @app.route("/api/dashboard", endpoint="dashboard")
    @login_required
    def dashboard():
        return ok(**container.dashboard_view.load(current_session()))

    @app.route("/api/dashboard/mark", methods=["POST"], endpoint="dashboard_mark")
    @login_required
    def dashboard_mark():
        data = request_data()
        result = container.dashboard_view.mark_today(current_session(), data.get("subject_id", ""), data.get("status"))
        return ok(
            "Attendance marked",
            record=record_to_dict(result.record),
            attended_classes=result.attended_classes,
            total_classes=result.total_classes,
        )

    @app.route("/api/calendar", endpoint="calendar")
    @login_required
    def calendar():
        data = container.calendar_view.month(
            current_session(),
            year=int_arg("year"),
            month=int_arg("month"),
            subject=request.args.get("subject"),
        )
        return ok(**data)

    @app.route("/api/analytics", endpoint="analytics")
    @login_required
    def analytics():
        return ok(**container.analytics_view.load(current_session()))
