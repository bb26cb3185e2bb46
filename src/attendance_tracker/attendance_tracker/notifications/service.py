from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable

from ..auth.session import UserSession
from ..common.datetime_utils import day_of_week, now_local
from ..common.validators import require_bool, require_int
from ..core.constants import DEFAULT_REMINDER_MINUTES
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError, ValidationError
from ..subjects.repository import SubjectRepository
from ..timetable.repository import TimetableRepository
from .inbox import NotificationInbox
from .model import Notification, NotificationSettings
from .rules import evaluate

logger = logging.getLogger(__name__)


class NotificationService:
    """Per-session inboxes and settings, refreshed from the backend on demand."""

    def __init__(
        self,
        subjects: SubjectRepository,
        timetable: TimetableRepository,
        *,
        reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._subjects = subjects
        self._timetable = timetable
        self._default_settings = NotificationSettings(reminder_minutes=reminder_minutes)
        self._clock = clock
        self._inboxes: dict[str, NotificationInbox] = {}
        self._settings: dict[str, NotificationSettings] = {}
        self._lock = threading.Lock()

    def inbox(self, session: UserSession) -> NotificationInbox:
        with self._lock:
            return self._inboxes.setdefault(session.session_id, NotificationInbox())

    def settings(self, session: UserSession) -> NotificationSettings:
        with self._lock:
            return self._settings.get(session.session_id, self._default_settings)

    def update_settings(self, session: UserSession, changes: dict) -> NotificationSettings:
        current = self.settings(session)
        updates = {}
        for name in ("low_attendance_warnings", "class_reminders", "achievement_alerts"):
            if name in changes:
                updates[name] = require_bool(changes[name], name.replace("_", " ").capitalize())
        if "reminder_minutes" in changes:
            minutes = require_int(changes["reminder_minutes"], "Reminder minutes")
            if minutes < 1 or minutes > 24 * 60:
                raise ValidationError("Reminder minutes must be between 1 and 1440")
            updates["reminder_minutes"] = minutes

        settings = replace(current, **updates)
        with self._lock:
            self._settings[session.session_id] = settings
        return settings

    def refresh(self, session: UserSession) -> list[Notification]:
        """Recompute notifications from fresh state; returns the ones not seen before."""

        now = self._clock()
        settings = self.settings(session)
        subjects = self._subjects.list_for_user(session.user_id)
        entries = self._timetable.list_for_day(session.user_id, day_of_week(now.date())) if settings.class_reminders else []

        fresh = self.inbox(session).add(evaluate(subjects, entries, settings, now))
        for n in fresh:
            if n.type == NotificationType.URGENT:
                logger.warning("urgent notification user_id=%s id=%s", session.user_id, n.notification_id)
            else:
                logger.debug("notification user_id=%s id=%s", session.user_id, n.notification_id)
        return fresh

    def list(self, session: UserSession) -> list[Notification]:
        return self.inbox(session).items()

    def unread_count(self, session: UserSession) -> int:
        return self.inbox(session).unread_count()

    def mark_read(self, session: UserSession, notification_id: str) -> None:
        if not self.inbox(session).mark_read(notification_id):
            raise NotFoundError("Notification not found")

    def mark_all_read(self, session: UserSession) -> int:
        return self.inbox(session).mark_all_read()

    def dismiss(self, session: UserSession, notification_id: str) -> None:
        if not self.inbox(session).dismiss(notification_id):
            raise NotFoundError("Notification not found")

    def forget(self, session: UserSession) -> None:
        with self._lock:
            self._inboxes.pop(session.session_id, None)
            self._settings.pop(session.session_id, None)
