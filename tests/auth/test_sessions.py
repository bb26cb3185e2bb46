from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from src.attendance_tracker.attendance_tracker.auth.session import SessionManager
from src.attendance_tracker.attendance_tracker.core.exceptions import AuthenticationError, ValidationError
from src.attendance_tracker.attendance_tracker.users.model import User
from src.attendance_tracker.attendance_tracker.users.service import AuthService, UserService
from tests.fakes import InMemoryUsers

USER = User(user_id="user-1", email="a@example.com", display_name="Ann", password_hash="x")


def test_session_lifecycle_runs_hooks():
    created, destroyed = [], []
    sessions = SessionManager()
    sessions.on_create(created.append)
    sessions.on_destroy(destroyed.append)

    session = sessions.create(USER)
    assert sessions.get(session.session_id) == session
    assert created == [session]

    assert sessions.destroy(session.session_id)
    assert sessions.get(session.session_id) is None
    assert destroyed == [session]
    assert not sessions.destroy(session.session_id)


def test_expired_session_is_destroyed_on_lookup():
    destroyed = []
    sessions = SessionManager(lifetime=timedelta(days=7))
    sessions.on_destroy(destroyed.append)
    start = datetime(2026, 3, 2, 9, 0)
    session = sessions.create(USER, now=start)

    assert sessions.get(session.session_id, now=start + timedelta(days=6)) is not None
    assert sessions.get(session.session_id, now=start + timedelta(days=7)) is None
    assert destroyed == [session]


def test_purge_expired_destroys_only_expired_sessions():
    destroyed = []
    sessions = SessionManager(lifetime=timedelta(days=7))
    sessions.on_destroy(destroyed.append)
    start = datetime(2026, 3, 2, 9, 0)
    old = sessions.create(USER, now=start)
    fresh = sessions.create(USER, now=start + timedelta(days=5))

    assert sessions.purge_expired(now=start + timedelta(days=8)) == 1
    assert sessions.active() == [fresh]
    assert destroyed == [old]


def test_login_sweeps_sessions_that_expired_unseen():
    sessions = SessionManager(lifetime=timedelta(days=7))
    start = datetime(2026, 3, 2, 9, 0)
    abandoned = sessions.create(USER, now=start)

    current = sessions.create(USER, now=start + timedelta(days=30))

    assert sessions.active() == [current]
    assert abandoned not in sessions.active()


def test_login_and_logout():
    users = InMemoryUsers()
    users.add("ann@example.com", "correct-horse", "Ann")
    sessions = SessionManager()
    auth = AuthService(users, sessions)

    session = auth.login(" Ann@Example.com ", "correct-horse")
    assert session.display_name == "Ann"
    assert auth.current(session.session_id) == session

    auth.logout(session.session_id)
    with pytest.raises(AuthenticationError):
        auth.current(session.session_id)


@pytest.mark.parametrize("email,password", [("ann@example.com", "wrong"), ("nobody@example.com", "correct-horse")])
def test_login_rejects_bad_credentials(email, password):
    users = InMemoryUsers()
    users.add("ann@example.com", "correct-horse")
    with pytest.raises(AuthenticationError):
        AuthService(users, SessionManager()).login(email, password)


def test_register_account():
    users = InMemoryUsers()
    svc = UserService(users)

    user_id = svc.register(email="New@Example.com", display_name="New", password="long-enough")
    assert users.get_by_email("new@example.com").user_id == user_id

    with pytest.raises(ValidationError):
        svc.register(email="new@example.com", display_name="Dup", password="long-enough")
    with pytest.raises(ValidationError):
        svc.register(email="short@example.com", display_name="S", password="short")
    with pytest.raises(ValidationError):
        svc.register(email="no-at-sign", display_name="S", password="long-enough")
