from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import replace
from datetime import date
from typing import Callable, ContextManager, Optional, Sequence

from ..auth.session import UserSession
from ..common.validators import require_status
from ..core.exceptions import NotFoundError, ValidationError
from ..subjects.model import Subject
from ..subjects.repository import SubjectRepository
from .counters import apply_delta, delete_delta, mark_delta
from .model import AttendanceRecord, MarkResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Marks and deletes attendance records and keeps the subject counters in step.

    The record write and the counter update run in one backend transaction.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        subjects: SubjectRepository,
        *,
        transaction: Callable[[], ContextManager[None]] = nullcontext,
    ):
        self._attendance = attendance
        self._subjects = subjects
        self._transaction = transaction

    def mark(self, session: UserSession, subject_id: str, on: date, status) -> MarkResult:
        status = require_status(status)

        with self._transaction():
            subject = self._require_subject(session, subject_id, for_update=True)
            existing = self._attendance.get_for_subject_and_date(subject_id, on)

            if existing is None:
                record = self._attendance.create(subject_id=subject_id, user_id=session.user_id, on=on, status=status)
                previous = None
            else:
                previous = existing.status
                if previous != status:
                    self._attendance.update_status(existing.record_id, status=status)
                record = replace(existing, status=status)

            delta = mark_delta(previous, status)
            attended, total = apply_delta(subject.attended_classes, subject.total_classes, delta)
            if not delta.is_zero:
                self._subjects.update_counters(subject_id, attended_classes=attended, total_classes=total)

        logger.info(
            "attendance marked subject_id=%s date=%s status=%s previous=%s delta=%+d/%+d",
            subject_id,
            on.isoformat(),
            status.value,
            previous.value if previous else None,
            delta.attended,
            delta.total,
        )
        return MarkResult(record=record, previous_status=previous, attended_classes=attended, total_classes=total)

    def delete(self, session: UserSession, record_id: str) -> Subject:
        """Delete a record and apply the inverse counter delta (clamped at 0)."""

        with self._transaction():
            record = self._attendance.get_by_id(record_id, user_id=session.user_id)
            if not record:
                raise NotFoundError("Attendance record not found")

            subject = self._require_subject(session, record.subject_id, for_update=True)
            if not self._attendance.delete(record_id):
                raise ValidationError("Failed to delete attendance record")

            attended, total = apply_delta(subject.attended_classes, subject.total_classes, delete_delta(record.status))
            if (attended, total) != (subject.attended_classes, subject.total_classes):
                self._subjects.update_counters(record.subject_id, attended_classes=attended, total_classes=total)

        logger.info("attendance deleted record_id=%s subject_id=%s", record_id, record.subject_id)
        return replace(subject, attended_classes=attended, total_classes=total)

    def get_for_date(self, session: UserSession, subject_id: str, on: date) -> Optional[AttendanceRecord]:
        self._require_subject(session, subject_id)
        return self._attendance.get_for_subject_and_date(subject_id, on)

    def list_for_subject(self, session: UserSession, subject_id: str) -> Sequence[AttendanceRecord]:
        self._require_subject(session, subject_id)
        return self._attendance.list_for_subject(subject_id)

    def list_in_range(
        self,
        session: UserSession,
        *,
        start: date,
        end: date,
        subject_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        if end < start:
            raise ValidationError("End date must not be before start date")
        if subject_id is None:
            return self._attendance.list_for_user_in_range(session.user_id, start=start, end=end)

        self._require_subject(session, subject_id)
        return self._attendance.list_for_subject_in_range(subject_id, start=start, end=end)

    def _require_subject(self, session: UserSession, subject_id: str, *, for_update: bool = False) -> Subject:
        subject = self._subjects.get_by_id(subject_id, user_id=session.user_id, for_update=for_update)
        if not subject:
            raise NotFoundError("Subject not found")
        return subject
