from __future__ import annotations

import atexit
from contextlib import nullcontext
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, ContextManager, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.session import SessionManager
from .core.constants import (
    DEFAULT_NOTIFICATION_INTERVAL_SECONDS,
    DEFAULT_REMINDER_MINUTES,
    DEFAULT_SESSION_DAYS,
)
from .database.connection import DBConfig, DatabaseConnection
from .notifications.scheduler import NotificationScheduler
from .notifications.service import NotificationService
from .subjects.mysql_subject_repository import MySQLSubjectRepository
from .subjects.repository import SubjectRepository
from .subjects.service import SubjectService
from .timetable.mysql_timetable_repository import MySQLTimetableRepository
from .timetable.repository import TimetableRepository
from .timetable.service import TimetableService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .views.analytics import AnalyticsView
from .views.calendar import CalendarView
from .views.dashboard import DashboardView
from .views.subjects import SubjectView
from .views.timetable import TimetableView


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    subjects_repo: SubjectRepository
    attendance_repo: AttendanceRepository
    timetable_repo: TimetableRepository

    sessions: SessionManager
    notification_scheduler: NotificationScheduler

    auth_service: AuthService
    user_service: UserService
    subject_service: SubjectService
    attendance_service: AttendanceService
    timetable_service: TimetableService
    notification_service: NotificationService

    dashboard_view: DashboardView
    subject_view: SubjectView
    calendar_view: CalendarView
    analytics_view: AnalyticsView
    timetable_view: TimetableView


def assemble_container(
    *,
    users_repo: UserRepository,
    subjects_repo: SubjectRepository,
    attendance_repo: AttendanceRepository,
    timetable_repo: TimetableRepository,
    transaction: Callable[[], ContextManager[None]] = nullcontext,
    conn: Optional[DatabaseConnection] = None,
    session_days: int = DEFAULT_SESSION_DAYS,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    notification_interval_seconds: float = DEFAULT_NOTIFICATION_INTERVAL_SECONDS,
) -> Container:
    """Wire services and views over any set of repositories.

    The notification task starts with each session only when the interval is
    positive.
    """

    sessions = SessionManager(lifetime=timedelta(days=session_days))

    subject_service = SubjectService(subjects_repo, attendance_repo, timetable_repo, transaction=transaction)
    attendance_service = AttendanceService(attendance_repo, subjects_repo, transaction=transaction)
    timetable_service = TimetableService(timetable_repo, subjects_repo)
    notification_service = NotificationService(subjects_repo, timetable_repo, reminder_minutes=reminder_minutes)
    scheduler = NotificationScheduler(
        notification_service,
        interval_seconds=notification_interval_seconds,
        on_expired=lambda s: sessions.destroy(s.session_id),
    )

    if notification_interval_seconds > 0:
        sessions.on_create(scheduler.start)
    sessions.on_destroy(scheduler.cancel)
    sessions.on_destroy(notification_service.forget)

    return Container(
        conn=conn,
        users_repo=users_repo,
        subjects_repo=subjects_repo,
        attendance_repo=attendance_repo,
        timetable_repo=timetable_repo,
        sessions=sessions,
        notification_scheduler=scheduler,
        auth_service=AuthService(users_repo, sessions),
        user_service=UserService(users_repo),
        subject_service=subject_service,
        attendance_service=attendance_service,
        timetable_service=timetable_service,
        notification_service=notification_service,
        dashboard_view=DashboardView(subject_service, timetable_service, attendance_service),
        subject_view=SubjectView(subject_service, attendance_service),
        calendar_view=CalendarView(subject_service, attendance_service),
        analytics_view=AnalyticsView(subject_service),
        timetable_view=TimetableView(timetable_service, subject_service),
    )


def build_container(
    *,
    db_config: dict,
    session_days: int = DEFAULT_SESSION_DAYS,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    notification_interval_seconds: float = DEFAULT_NOTIFICATION_INTERVAL_SECONDS,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    container = assemble_container(
        users_repo=MySQLUserRepository(conn),
        subjects_repo=MySQLSubjectRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        timetable_repo=MySQLTimetableRepository(conn),
        transaction=conn.transaction,
        conn=conn,
        session_days=session_days,
        reminder_minutes=reminder_minutes,
        notification_interval_seconds=notification_interval_seconds,
    )
    atexit.register(container.notification_scheduler.stop_all)
    return container
