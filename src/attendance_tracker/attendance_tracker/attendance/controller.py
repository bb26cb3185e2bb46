from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_session, date_arg, make_login_required, ok, request_data
from ..container import Container
from ..views.serializers import record_to_dict


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.auth_service)

    @app.route("/api/subjects/<subject_id>/attendance", endpoint="subject_attendance")
    @login_required
    def subject_attendance(subject_id: str):
        start = date_arg("start")
        end = date_arg("end")
        user_session = current_session()
        if start or end:
            records = container.attendance_service.list_in_range(
                user_session,
                start=start or date.min,
                end=end or date.max,
                subject_id=subject_id,
            )
        else:
            records = container.attendance_service.list_for_subject(user_session, subject_id)
        return ok(records=[record_to_dict(r) for r in records])

    @app.route("/api/subjects/<subject_id>/attendance", methods=["POST"], endpoint="mark_attendance")
    @login_required
    def mark_attendance(subject_id: str):
        data = request_data()
        on = parse_iso_date(data["date"]) if data.get("date") else date.today()
        result = container.attendance_service.mark(current_session(), subject_id, on, data.get("status"))
        return ok(
            "Attendance marked",
            record=record_to_dict(result.record),
            previous_status=result.previous_status.value if result.previous_status else None,
            attended_classes=result.attended_classes,
            total_classes=result.total_classes,
        )

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="delete_attendance")
    @login_required
    def delete_attendance(record_id: str):
        subject = container.attendance_service.delete(current_session(), record_id)
        return ok(
            "Attendance record deleted",
            attended_classes=subject.attended_classes,
            total_classes=subject.total_classes,
        )
