"""Derive notifications from the current subjects and today's timetable.

Pure functions: every tick recomputes from freshly fetched state.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Sequence

from ..common.datetime_utils import format_clock
from ..core.constants import EXCELLENT_MARGIN, PERFECT_MIN_CLASSES, WARNING_BAND
from ..core.enums import NotificationType
from ..stats.calculator import classes_needed_to_attend, meets_requirement, percentage
from ..subjects.model import Subject
from ..timetable.model import TimetableEntry
from .model import Notification, NotificationSettings


def low_attendance(subjects: Iterable[Subject], now: datetime) -> list[Notification]:
    found: list[Notification] = []
    for s in subjects:
        pct = percentage(s.attended_classes, s.total_classes)
        if meets_requirement(s.attended_classes, s.total_classes, s.required_percentage):
            continue

        needed = classes_needed_to_attend(s.attended_classes, s.total_classes, s.required_percentage)
        if needed is None:
            advice = f"{s.required_percentage}% can no longer be reached."
        else:
            advice = f"You need {needed} more classes to meet criteria."
        found.append(
            Notification(
                notification_id=f"low-attendance-{s.subject_id}",
                type=NotificationType.WARNING,
                title="Low Attendance Warning",
                message=f"{s.name} is at {pct}%. {advice}",
                created_at=now,
                subject_id=s.subject_id,
            )
        )

        if pct < s.required_percentage - WARNING_BAND:
            found.append(
                Notification(
                    notification_id=f"critical-attendance-{s.subject_id}",
                    type=NotificationType.URGENT,
                    title="Critical Attendance Alert",
                    message=f"{s.name} attendance is critically low at {pct}%. Immediate action required!",
                    created_at=now,
                    subject_id=s.subject_id,
                )
            )
    return found


def upcoming_classes(entries: Iterable[TimetableEntry], now: datetime, *, minutes: int) -> list[Notification]:
    """Classes starting strictly after ``now`` and strictly before ``now + minutes``."""

    horizon = now + timedelta(minutes=minutes)
    found: list[Notification] = []
    for e in entries:
        starts_at = datetime.combine(now.date(), e.start_time, tzinfo=now.tzinfo)
        if now < starts_at < horizon:
            found.append(
                Notification(
                    notification_id=f"reminder-{e.entry_id}",
                    type=NotificationType.REMINDER,
                    title="Upcoming Class",
                    message=f"{e.subject_name or e.subject_id} class starts at {format_clock(e.start_time)}",
                    created_at=now,
                    subject_id=e.subject_id,
                )
            )
    return found


def achievements(subjects: Iterable[Subject], now: datetime) -> list[Notification]:
    found: list[Notification] = []
    for s in subjects:
        pct = percentage(s.attended_classes, s.total_classes)
        if pct == 100 and s.total_classes >= PERFECT_MIN_CLASSES:
            found.append(
                Notification(
                    notification_id=f"perfect-{s.subject_id}",
                    type=NotificationType.ACHIEVEMENT,
                    title="Perfect Attendance!",
                    message=f"Congratulations! You have perfect attendance in {s.name}",
                    created_at=now,
                    subject_id=s.subject_id,
                )
            )
        if s.total_classes > 0 and pct >= s.required_percentage + EXCELLENT_MARGIN:
            found.append(
                Notification(
                    notification_id=f"excellent-{s.subject_id}",
                    type=NotificationType.ACHIEVEMENT,
                    title="Excellent Attendance",
                    message=f"Great job! {s.name} attendance is at {pct}%",
                    created_at=now,
                    subject_id=s.subject_id,
                )
            )
    return found


def evaluate(
    subjects: Sequence[Subject],
    todays_entries: Sequence[TimetableEntry],
    settings: NotificationSettings,
    now: datetime,
) -> list[Notification]:
    found: list[Notification] = []
    if settings.low_attendance_warnings:
        found.extend(low_attendance(subjects, now))
    if settings.class_reminders:
        found.extend(upcoming_classes(todays_entries, now, minutes=settings.reminder_minutes))
    if settings.achievement_alerts:
        found.extend(achievements(subjects, now))
    return found
