from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SESSION_DAYS
from ..users.model import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserSession:
    """Identity of the logged-in user, passed explicitly to every service call.

    Created at login and destroyed at logout; nothing else holds a "current user".
    """

    session_id: str
    user_id: str
    display_name: str
    started_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or now_local()) >= self.expires_at


SessionHook = Callable[[UserSession], None]


class SessionManager:
    """In-process registry of live sessions with lifecycle hooks."""

    def __init__(self, *, lifetime: timedelta = timedelta(days=DEFAULT_SESSION_DAYS)):
        self._lifetime = lifetime
        self._sessions: dict[str, UserSession] = {}
        self._lock = threading.Lock()
        self._on_create: list[SessionHook] = []
        self._on_destroy: list[SessionHook] = []

    def on_create(self, hook: SessionHook) -> None:
        self._on_create.append(hook)

    def on_destroy(self, hook: SessionHook) -> None:
        self._on_destroy.append(hook)

    def create(self, user: User, *, now: Optional[datetime] = None) -> UserSession:
        now = now or now_local()
        self.purge_expired(now=now)
        session = UserSession(
            session_id=secrets.token_urlsafe(32),
            user_id=user.user_id,
            display_name=user.display_name,
            started_at=now,
            expires_at=now + self._lifetime,
        )
        with self._lock:
            self._sessions[session.session_id] = session

        logger.info("session started user_id=%s", session.user_id)
        for hook in self._on_create:
            hook(session)
        return session

    def get(self, session_id: Optional[str], *, now: Optional[datetime] = None) -> Optional[UserSession]:
        if not session_id:
            return None
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.is_expired(now):
            self.destroy(session_id)
            return None
        return session

    def destroy(self, session_id: Optional[str]) -> bool:
        if not session_id:
            return False
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False

        logger.info("session ended user_id=%s", session.user_id)
        for hook in self._on_destroy:
            hook(session)
        return True

    def active(self) -> list[UserSession]:
        with self._lock:
            return list(self._sessions.values())

    def purge_expired(self, *, now: Optional[datetime] = None) -> int:
        """Destroy every expired session, running the destroy hooks for each."""

        now = now or now_local()
        expired = [s for s in self.active() if s.is_expired(now)]
        return sum(1 for s in expired if self.destroy(s.session_id))
