from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_REMINDER_MINUTES
from ..core.enums import NotificationType


@dataclass(frozen=True)
class Notification:
    """One inbox item.

    ``notification_id`` is derived from what it is about (``low-attendance-<subject>``,
    ``reminder-<entry>`` ...) so the same condition is never delivered twice.
    """

    notification_id: str
    type: NotificationType
    title: str
    message: str
    created_at: datetime
    read: bool = False
    subject_id: Optional[str] = None

    def mark_read(self) -> "Notification":
        return replace(self, read=True)

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "type": self.type.value,
            "title": self.title,
            "message": self.message,
            "timestamp": self.created_at.isoformat(),
            "read": self.read,
            "subject_id": self.subject_id,
        }


@dataclass(frozen=True)
class NotificationSettings:
    low_attendance_warnings: bool = True
    class_reminders: bool = True
    achievement_alerts: bool = True
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES

    def to_dict(self) -> dict:
        return {
            "low_attendance_warnings": self.low_attendance_warnings,
            "class_reminders": self.class_reminders,
            "achievement_alerts": self.achievement_alerts,
            "reminder_minutes": self.reminder_minutes,
        }
