from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from ..auth.session import SessionManager, UserSession
from ..common.validators import require_min_length, require_non_empty
from ..core.exceptions import AuthenticationError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate a user and open/close their session."""

    def __init__(self, users: UserRepository, sessions: SessionManager):
        self._users = users
        self._sessions = sessions

    def login(self, email: str, password: str) -> UserSession:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return self._sessions.create(user)

    def logout(self, session_id: str) -> None:
        self._sessions.destroy(session_id)

    def current(self, session_id: str | None) -> UserSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise AuthenticationError("Please sign in to continue")
        return session


class UserService:
    """Use case: create accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, email: str, display_name: str, password: str) -> str:
        email = require_non_empty(email, "Email").lower()
        display_name = require_non_empty(display_name, "Name")
        require_min_length(password, "Password", 8)

        if "@" not in email:
            raise ValidationError("Email is not valid")
        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        user_id = self._users.create_user(
            email=email,
            display_name=display_name,
            password_hash=generate_password_hash(password),
        )
        logger.info("user registered user_id=%s", user_id)
        return user_id
