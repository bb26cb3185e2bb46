from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status of one subject on one date, as stored in the backend."""

    PRESENT = "present"
    ABSENT = "absent"
    CANCELLED = "cancelled"


class DayStatus(str, Enum):
    """Calendar classification of a day (or subject-day) from its records."""

    CANCELLED = "cancelled"
    FULLY_ATTENDED = "fully-attended"
    PARTIALLY_ATTENDED = "partially-attended"
    ABSENT = "absent"
    NONE = "none"


class Standing(str, Enum):
    """How a percentage sits against the required threshold."""

    SAFE = "safe"
    WARNING = "warning"
    DANGER = "danger"


class ProjectionKind(str, Enum):
    CAN_MISS = "can_miss"
    NEED_TO_ATTEND = "need_to_attend"
    UNLIMITED = "unlimited"
    UNREACHABLE = "unreachable"


class NotificationType(str, Enum):
    WARNING = "warning"
    URGENT = "urgent"
    REMINDER = "reminder"
    ACHIEVEMENT = "achievement"
