from __future__ import annotations

from flask import Flask

from ..common.http import current_session, make_login_required, ok, request_data
from ..container import Container
from ..core.constants import DEFAULT_REQUIRED_PERCENTAGE
from ..views.serializers import subject_to_dict


def register(app: Flask, container: Container) -> None:
    login_required = make_login_required(container.auth_service)

    @app.route("/api/subjects", endpoint="list_subjects")
    @login_required
    def list_subjects():
        return ok(subjects=container.subject_view.list(current_session()))

    @app.route("/api/subjects", methods=["POST"], endpoint="create_subject")
    @login_required
    def create_subject():
        data = request_data()
        subject = container.subject_service.create(
            current_session(),
            name=data.get("name", ""),
            code=data.get("code"),
            required_percentage=data.get("required_percentage", DEFAULT_REQUIRED_PERCENTAGE),
        )
        return ok("Subject added", 201, subject=subject_to_dict(subject))

    @app.route("/api/subjects/<subject_id>", endpoint="subject_detail")
    @login_required
    def subject_detail(subject_id: str):
        return ok(**container.subject_view.detail(current_session(), subject_id))

    @app.route("/api/subjects/<subject_id>", methods=["PUT"], endpoint="update_subject")
    @login_required
    def update_subject(subject_id: str):
        data = request_data()
        subject = container.subject_service.update(
            current_session(),
            subject_id,
            name=data.get("name", ""),
            code=data.get("code"),
            required_percentage=data.get("required_percentage", DEFAULT_REQUIRED_PERCENTAGE),
            attended_classes=data.get("attended_classes"),
            total_classes=data.get("total_classes"),
        )
        return ok("Subject updated", subject=subject_to_dict(subject))

    @app.route("/api/subjects/<subject_id>/counters", methods=["PUT"], endpoint="override_counters")
    @login_required
    def override_counters(subject_id: str):
        data = request_data()
        subject = container.subject_service.override_counters(
            current_session(),
            subject_id,
            attended_classes=data.get("attended_classes"),
            total_classes=data.get("total_classes"),
        )
        return ok("Counters updated", subject=subject_to_dict(subject))

    @app.route("/api/subjects/<subject_id>/reconcile", methods=["POST"], endpoint="reconcile_subject")
    @login_required
    def reconcile_subject(subject_id: str):
        subject = container.subject_service.reconcile_counters(current_session(), subject_id)
        return ok("Counters rebuilt from attendance records", subject=subject_to_dict(subject))

    @app.route("/api/subjects/<subject_id>", methods=["DELETE"], endpoint="delete_subject")
    @login_required
    def delete_subject(subject_id: str):
        container.subject_service.delete(current_session(), subject_id)
        return ok("Subject deleted")
