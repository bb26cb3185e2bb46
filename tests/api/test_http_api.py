from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.container import assemble_container
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import BackendError
from src.attendance_tracker.attendance_tracker.main import create_app
from tests.fakes import InMemoryAttendance, InMemorySubjects, InMemoryTimetable, InMemoryUsers, SnapshotTransaction

EMAIL, PASSWORD = "ann@example.com", "correct-horse"


@pytest.fixture()
def stack():
    users = InMemoryUsers()
    user = users.add(EMAIL, PASSWORD, "Ann")
    subjects = InMemorySubjects()
    attendance = InMemoryAttendance()
    timetable = InMemoryTimetable(subjects)
    container = assemble_container(
        users_repo=users,
        subjects_repo=subjects,
        attendance_repo=attendance,
        timetable_repo=timetable,
        transaction=SnapshotTransaction(subjects, attendance, timetable),
        notification_interval_seconds=0,
    )
    app = create_app(
        {"SECRET_KEY": "test", "DEBUG": False, "TESTING": True, "LOG_LEVEL": "WARNING"},
        container=container,
    )
    return app, container, user, subjects, attendance


@pytest.fixture()
def client(stack):
    app = stack[0]
    c = app.test_client()
    res = c.post("/api/auth/login", json={"email": EMAIL, "password": PASSWORD})
    assert res.status_code == 200
    return c


def test_requires_login(stack):
    res = stack[0].test_client().get("/api/subjects")
    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Please sign in to continue"}


def test_bad_login(stack):
    res = stack[0].test_client().post("/api/auth/login", json={"email": EMAIL, "password": "nope"})
    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_me_and_logout_end_the_session(client, stack):
    container = stack[1]
    me = client.get("/api/auth/me").get_json()
    assert me["user"]["display_name"] == "Ann"
    assert len(container.sessions.active()) == 1

    assert client.post("/api/auth/logout").status_code == 200
    assert container.sessions.active() == []
    assert client.get("/api/auth/me").status_code == 401


def test_subject_crud_flow(client, stack):
    res = client.post("/api/subjects", json={"name": "Physics", "code": "PH101"})
    assert res.status_code == 201
    subject = res.get_json()["subject"]
    assert subject["required_percentage"] == 75
    assert subject["projection"]["message"] == "Need to attend 1 more class consecutively"

    sid = subject["id"]
    res = client.put(f"/api/subjects/{sid}", json={"name": "Physics I", "code": "PH101", "required_percentage": 80})
    assert res.get_json()["subject"]["name"] == "Physics I"

    res = client.put(f"/api/subjects/{sid}/counters", json={"attended_classes": 8, "total_classes": 10})
    assert res.get_json()["subject"]["percentage"] == 80

    listed = client.get("/api/subjects").get_json()["subjects"]
    assert [s["name"] for s in listed] == ["Physics I"]

    assert client.delete(f"/api/subjects/{sid}").status_code == 200
    assert client.get(f"/api/subjects/{sid}").status_code == 404


def test_validation_errors_are_400(client):
    res = client.post("/api/subjects", json={"name": "   "})
    assert res.status_code == 400
    assert res.get_json() == {"success": False, "message": "Subject name is required"}


def test_rejected_subject_edit_leaves_subject_untouched(client, stack):
    subjects = stack[3]
    subject = subjects.add(stack[2].user_id, "Physics", attended=3, total=4)

    res = client.put(
        f"/api/subjects/{subject.subject_id}",
        json={"name": "New", "required_percentage": 75, "attended_classes": 5, "total_classes": 2},
    )

    assert res.status_code == 400
    assert res.get_json()["message"] == "Attended classes cannot be more than total classes"
    stored = subjects.rows[subject.subject_id]
    assert stored.name == "Physics"
    assert (stored.attended_classes, stored.total_classes) == (3, 4)

    res = client.put(
        f"/api/subjects/{subject.subject_id}",
        json={"name": "New", "required_percentage": 75, "attended_classes": 2, "total_classes": 5},
    )
    assert res.status_code == 200
    assert res.get_json()["subject"]["name"] == "New"
    assert res.get_json()["subject"]["attended_classes"] == 2


def test_mark_and_delete_attendance(client, stack):
    subjects = stack[3]
    subject = subjects.add(stack[2].user_id, "Maths")

    res = client.post(f"/api/subjects/{subject.subject_id}/attendance", json={"date": "2026-03-02", "status": "present"})
    body = res.get_json()
    assert (body["attended_classes"], body["total_classes"]) == (1, 1)

    res = client.post(f"/api/subjects/{subject.subject_id}/attendance", json={"date": "2026-03-02", "status": "absent"})
    body = res.get_json()
    assert body["previous_status"] == "present"
    assert (body["attended_classes"], body["total_classes"]) == (0, 1)

    records = client.get(f"/api/subjects/{subject.subject_id}/attendance").get_json()["records"]
    assert [r["status"] for r in records] == ["absent"]

    res = client.delete(f"/api/attendance/{records[0]['id']}")
    assert (res.get_json()["attended_classes"], res.get_json()["total_classes"]) == (0, 0)
    assert client.delete(f"/api/attendance/{records[0]['id']}").status_code == 404


def test_mark_rejects_bad_date(client, stack):
    subject = stack[3].add(stack[2].user_id, "Maths")
    res = client.post(f"/api/subjects/{subject.subject_id}/attendance", json={"date": "02/03/2026", "status": "present"})
    assert res.status_code == 400


def test_backend_failure_is_503_and_rolls_back(client, stack):
    subjects, attendance = stack[3], stack[4]
    subject = subjects.add(stack[2].user_id, "Maths")
    subjects.fail_counter_writes = True

    res = client.post(f"/api/subjects/{subject.subject_id}/attendance", json={"date": "2026-03-02", "status": "present"})

    assert res.status_code == 503
    assert res.get_json()["success"] is False
    assert attendance.rows == {}


def test_reconcile_endpoint(client, stack):
    subjects, attendance = stack[3], stack[4]
    subject = subjects.add(stack[2].user_id, "Maths", attended=4, total=4)
    attendance.add(subject, date(2026, 3, 2), AttendanceStatus.ABSENT)

    res = client.post(f"/api/subjects/{subject.subject_id}/reconcile")
    body = res.get_json()["subject"]
    assert (body["attended_classes"], body["total_classes"]) == (0, 1)


def test_timetable_endpoints(client, stack):
    subject = stack[3].add(stack[2].user_id, "Maths")

    res = client.post(
        "/api/timetable",
        json={"subject_id": subject.subject_id, "day_of_week": 1, "start_time": "09:00", "end_time": "10:00"},
    )
    assert res.status_code == 201
    entry_id = res.get_json()["entry"]["id"]

    res = client.post(
        "/api/timetable",
        json={"subject_id": subject.subject_id, "day_of_week": 1, "start_time": "10:00", "end_time": "09:00"},
    )
    assert res.status_code == 400

    week = client.get("/api/timetable").get_json()
    assert [e["id"] for e in week["days"][1]["entries"]] == [entry_id]

    today = client.get("/api/timetable/today?date=2026-03-02").get_json()
    assert today["date"] == "2026-03-02"
    assert [e["id"] for e in today["entries"]] == [entry_id]

    assert client.delete(f"/api/timetable/{entry_id}").status_code == 200


def test_calendar_and_analytics(client, stack):
    subject = stack[3].add(stack[2].user_id, "Maths", attended=1, total=2)
    stack[4].add(subject, date(2026, 3, 2), AttendanceStatus.PRESENT)
    stack[4].add(subject, date(2026, 3, 3), AttendanceStatus.ABSENT)

    cal = client.get("/api/calendar?year=2026&month=3&subject=all").get_json()
    assert cal["summary"]["fully_attended"] == 1
    assert cal["summary"]["absent_days"] == 1
    assert client.get("/api/calendar?year=2026&month=13").status_code == 400
    assert client.get("/api/calendar?year=abc").status_code == 400

    analytics = client.get("/api/analytics").get_json()
    assert analytics["overall"]["subjects_at_risk"] == 1


def test_dashboard_mark(client, stack):
    subject = stack[3].add(stack[2].user_id, "Maths")
    res = client.post("/api/dashboard/mark", json={"subject_id": subject.subject_id, "status": "present"})
    assert res.get_json()["attended_classes"] == 1
    assert client.get("/api/dashboard").get_json()["success"] is True


def test_notifications_endpoints(client, stack):
    stack[3].add(stack[2].user_id, "Maths", attended=1, total=10)

    listed = client.get("/api/notifications?refresh=1").get_json()
    assert listed["unread_count"] == 2
    first = listed["notifications"][0]["id"]

    assert client.post(f"/api/notifications/{first}/read").status_code == 200
    assert client.get("/api/notifications").get_json()["unread_count"] == 1
    assert client.post("/api/notifications/read-all").get_json()["updated"] == 1
    assert client.delete(f"/api/notifications/{first}").status_code == 200
    assert client.delete(f"/api/notifications/{first}").status_code == 404

    settings = client.put("/api/notifications/settings", json={"reminder_minutes": 30}).get_json()["settings"]
    assert settings["reminder_minutes"] == 30
    assert client.get("/api/notifications/settings").get_json()["settings"]["reminder_minutes"] == 30


def test_notification_settings_from_form_fields(client):
    res = client.put(
        "/api/notifications/settings",
        data={"class_reminders": "false", "achievement_alerts": "on", "reminder_minutes": "10"},
    )
    settings = res.get_json()["settings"]
    assert settings["class_reminders"] is False
    assert settings["achievement_alerts"] is True
    assert settings["reminder_minutes"] == 10

    res = client.put("/api/notifications/settings", data={"class_reminders": "maybe"})
    assert res.status_code == 400
    assert client.get("/api/notifications/settings").get_json()["settings"]["class_reminders"] is False


def test_register_account(stack):
    c = stack[0].test_client()
    res = c.post("/api/auth/register", json={"email": "bo@example.com", "display_name": "Bo", "password": "long-enough"})
    assert res.status_code == 201
    assert c.post("/api/auth/login", json={"email": "bo@example.com", "password": "long-enough"}).status_code == 200


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nope")
    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_backend_error_handler_hides_details(stack):
    app = stack[0]

    @app.route("/boom")
    def boom():
        raise BackendError("password=secret")

    res = app.test_client().get("/boom")
    assert res.status_code == 503
    assert "secret" not in res.get_json()["message"]
