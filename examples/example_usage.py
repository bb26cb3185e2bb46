"""Example: drive the service layer directly, without Flask.

Signs in the demo user, marks today's attendance for the first subject and
prints the projection for every subject.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.attendance_tracker.attendance_tracker.container import build_container
from src.attendance_tracker.attendance_tracker.views.serializers import subject_to_dict


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, notification_interval_seconds=0)

    session = container.auth_service.login("demo@example.com", "demo1234")
    try:
        subjects = container.subject_service.list(session)
        if not subjects:
            subjects = [container.subject_service.create(session, name="Mathematics", code="MATH101")]

        result = container.attendance_service.mark(session, subjects[0].subject_id, date.today(), "present")
        print(f"marked {result.record.status.value}: {result.attended_classes}/{result.total_classes}")

        for s in container.subject_service.list(session):
            item = subject_to_dict(s)
            print(f"{item['name']}: {item['percentage']}% - {item['projection']['message']}")
    finally:
        container.auth_service.logout(session.session_id)


if __name__ == "__main__":
    main()
