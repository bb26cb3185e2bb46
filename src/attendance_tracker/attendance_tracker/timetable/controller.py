from __future__ import annotations

from datetime import date

from flask import Flask

from ..common.http import current_session, date_arg, make_login_required, ok, request_data
from ..container import Container
from ..views.serializers import entry_to_dict


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.auth_service)

    def entry_fields(data: dict) -> dict:
        return {
            "subject_id": data.get("subject_id", ""),
            "day": data.get("day_of_week"),
            "start_time": data.get("start_time"),
            "end_time": data.get("end_time"),
        }

    @app.route("/api/timetable", endpoint="timetable")
    @login_required
    def timetable():
        return ok(**container.timetable_view.weekly(current_session()))

    @app.route("/api/timetable/today", endpoint="timetable_today")
    @login_required
    def timetable_today():
        on = date_arg("date", date.today())
        entries = container.timetable_service.for_date(current_session(), on)
        return ok(date=on.isoformat(), entries=[entry_to_dict(e) for e in entries])

    @app.route("/api/timetable", methods=["POST"], endpoint="create_timetable_entry")
    @login_required
    def create_timetable_entry():
        entry = container.timetable_service.create(current_session(), **entry_fields(request_data()))
        return ok("Class added to timetable", 201, entry=entry_to_dict(entry))

    @app.route("/api/timetable/<entry_id>", methods=["PUT"], endpoint="update_timetable_entry")
    @login_required
    def update_timetable_entry(entry_id: str):
        entry = container.timetable_service.update(current_session(), entry_id, **entry_fields(request_data()))
        return ok("Timetable entry updated", entry=entry_to_dict(entry))

    @app.route("/api/timetable/<entry_id>", methods=["DELETE"], endpoint="delete_timetable_entry")
    @login_required
    def delete_timetable_entry(entry_id: str):
        container.timetable_service.delete(current_session(), entry_id)
        return ok("Timetable entry deleted")
