from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta

import pytest

from src.attendance_tracker.attendance_tracker.auth.session import SessionManager
from src.attendance_tracker.attendance_tracker.core.exceptions import NotFoundError, ValidationError
from src.attendance_tracker.attendance_tracker.notifications.scheduler import NotificationScheduler
from src.attendance_tracker.attendance_tracker.notifications.service import NotificationService
from src.attendance_tracker.attendance_tracker.users.model import User
from tests.fakes import InMemorySubjects, InMemoryTimetable, make_session

# Monday
NOW = datetime(2026, 3, 2, 8, 55, 0)


def _build():
    subjects = InMemorySubjects()
    timetable = InMemoryTimetable(subjects)
    return NotificationService(subjects, timetable, clock=lambda: NOW), subjects, timetable


def test_refresh_delivers_each_condition_once():
    svc, subjects, timetable = _build()
    subject = subjects.add(name="Physics", attended=5, total=10)
    timetable.add(subject, 1, "09:00", "10:00")
    session = make_session()

    first = svc.refresh(session)
    second = svc.refresh(session)

    assert sorted(n.notification_id for n in first) == sorted(
        [f"low-attendance-{subject.subject_id}", f"critical-attendance-{subject.subject_id}", f"reminder-{next(iter(timetable.rows))}"]
    )
    assert second == []
    assert svc.unread_count(session) == 3


def test_inboxes_are_per_session():
    svc, subjects, _ = _build()
    subjects.add(attended=0, total=4)
    subjects.add("user-2", attended=0, total=4)

    svc.refresh(make_session("user-1"))
    assert len(svc.list(make_session("user-1"))) == 2
    assert svc.list(make_session("user-2")) == []


def test_settings_update_and_validation():
    svc, _, _ = _build()
    session = make_session()

    settings = svc.update_settings(session, {"class_reminders": False, "reminder_minutes": "30"})
    assert (settings.class_reminders, settings.reminder_minutes) == (False, 30)
    assert svc.settings(session).low_attendance_warnings is True

    with pytest.raises(ValidationError):
        svc.update_settings(session, {"reminder_minutes": 0})


def test_settings_parse_string_booleans():
    svc, _, _ = _build()
    session = make_session()

    settings = svc.update_settings(session, {"low_attendance_warnings": "false", "class_reminders": "0"})
    assert settings.low_attendance_warnings is False
    assert settings.class_reminders is False

    with pytest.raises(ValidationError):
        svc.update_settings(session, {"achievement_alerts": "sometimes"})
    assert svc.settings(session).achievement_alerts is True


def test_mark_read_unknown_is_not_found():
    svc, _, _ = _build()
    with pytest.raises(NotFoundError):
        svc.mark_read(make_session(), "nope")
    with pytest.raises(NotFoundError):
        svc.dismiss(make_session(), "nope")


def test_forget_drops_inbox_and_settings():
    svc, subjects, _ = _build()
    subjects.add(attended=0, total=4)
    session = make_session()
    svc.refresh(session)
    svc.update_settings(session, {"achievement_alerts": False})

    svc.forget(session)
    assert svc.list(session) == []
    assert svc.settings(session).achievement_alerts is True


class _CountingService:
    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail
        self.ticked = threading.Event()

    def refresh(self, session):
        self.calls += 1
        self.ticked.set()
        if self.fail:
            raise RuntimeError("backend down")
        return []


def test_scheduler_runs_until_cancelled():
    service = _CountingService()
    scheduler = NotificationScheduler(service, interval_seconds=0.01)
    session = make_session()

    scheduler.start(session)
    scheduler.start(session)
    assert service.ticked.wait(2)
    assert scheduler.running() == 1

    assert scheduler.cancel(session, timeout=2)
    calls = service.calls
    assert scheduler.running() == 0
    assert not scheduler.cancel(session)
    assert service.calls == calls


def test_failing_tick_is_logged_and_does_not_stop_the_task(caplog):
    service = _CountingService(fail=True)
    scheduler = NotificationScheduler(service, interval_seconds=60)

    with caplog.at_level("ERROR"):
        scheduler.tick(make_session())
        scheduler.tick(make_session())

    assert service.calls == 2
    assert "notification refresh failed" in caplog.text


def test_stop_all():
    service = _CountingService()
    scheduler = NotificationScheduler(service, interval_seconds=0.01)
    scheduler.start(make_session("a"))
    scheduler.start(make_session("b"))

    scheduler.stop_all(timeout=2)
    assert scheduler.running() == 0


def _wait_until(condition, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


def test_expired_session_stops_its_task_and_is_destroyed():
    service = _CountingService()
    forgotten = []
    sessions = SessionManager(lifetime=timedelta(milliseconds=50))
    scheduler = NotificationScheduler(
        service,
        interval_seconds=0.01,
        on_expired=lambda s: sessions.destroy(s.session_id),
    )
    sessions.on_create(scheduler.start)
    sessions.on_destroy(scheduler.cancel)
    sessions.on_destroy(forgotten.append)

    session = sessions.create(User(user_id="user-1", email="a@example.com", display_name="Ann", password_hash="x"))

    assert _wait_until(lambda: forgotten == [session])
    assert scheduler.running() == 0
    assert sessions.active() == []

    calls = service.calls
    time.sleep(0.05)
    assert service.calls == calls


def test_task_for_an_already_expired_session_never_ticks():
    service = _CountingService()
    expired = []
    scheduler = NotificationScheduler(service, interval_seconds=0.01, on_expired=expired.append)
    session = make_session(expires_at=datetime(2026, 3, 2, 10, 0, 0))

    scheduler.start(session)

    assert _wait_until(lambda: scheduler.running() == 0)
    assert expired == [session]
    assert service.calls == 0
