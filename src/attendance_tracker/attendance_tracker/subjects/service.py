from __future__ import annotations

import logging
from contextlib import nullcontext
from typing import Callable, ContextManager, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..auth.session import UserSession
from ..common.validators import require_counters, require_non_empty, require_percentage
from ..core.constants import DEFAULT_REQUIRED_PERCENTAGE
from ..core.exceptions import NotFoundError, ValidationError
from ..stats.aggregator import replay_counters
from ..timetable.repository import TimetableRepository
from .model import Subject
from .repository import SubjectRepository

logger = logging.getLogger(__name__)


def _clean_code(code: Optional[str]) -> Optional[str]:
    code = (code or "").strip()
    return code or None


class SubjectService:
    def __init__(
        self,
        subjects: SubjectRepository,
        attendance: AttendanceRepository,
        timetable: TimetableRepository,
        *,
        transaction: Callable[[], ContextManager[None]] = nullcontext,
    ):
        self._subjects = subjects
        self._attendance = attendance
        self._timetable = timetable
        self._transaction = transaction

    def list(self, session: UserSession) -> Sequence[Subject]:
        return self._subjects.list_for_user(session.user_id)

    def find(self, session: UserSession, subject_id: str) -> Optional[Subject]:
        return self._subjects.get_by_id(subject_id, user_id=session.user_id)

    def get(self, session: UserSession, subject_id: str) -> Subject:
        subject = self.find(session, subject_id)
        if not subject:
            raise NotFoundError("Subject not found")
        return subject

    def create(
        self,
        session: UserSession,
        *,
        name: str,
        code: Optional[str] = None,
        required_percentage=DEFAULT_REQUIRED_PERCENTAGE,
    ) -> Subject:
        name = require_non_empty(name, "Subject name")
        required = require_percentage(required_percentage)

        subject = self._subjects.create(
            user_id=session.user_id,
            name=name,
            code=_clean_code(code),
            required_percentage=required,
        )
        logger.info("subject created subject_id=%s user_id=%s", subject.subject_id, session.user_id)
        return subject

    def update(
        self,
        session: UserSession,
        subject_id: str,
        *,
        name: str,
        code: Optional[str] = None,
        required_percentage=DEFAULT_REQUIRED_PERCENTAGE,
        attended_classes=None,
        total_classes=None,
    ) -> Subject:
        """Edit name, code and requirement, optionally overriding the counters in the same write.

        A counter left as None keeps its stored value.
        """

        name = require_non_empty(name, "Subject name")
        required = require_percentage(required_percentage)
        counters = None
        if attended_classes is not None and total_classes is not None:
            counters = require_counters(attended_classes, total_classes)

        with self._transaction():
            subject = self._require_owned(session, subject_id, for_update=True)
            if counters is None and (attended_classes is not None or total_classes is not None):
                counters = require_counters(
                    subject.attended_classes if attended_classes is None else attended_classes,
                    subject.total_classes if total_classes is None else total_classes,
                )

            self._subjects.update_details(subject_id, name=name, code=_clean_code(code), required_percentage=required)
            if counters is not None:
                self._subjects.update_counters(subject_id, attended_classes=counters[0], total_classes=counters[1])

        return self.get(session, subject_id)

    def override_counters(self, session: UserSession, subject_id: str, *, attended_classes, total_classes) -> Subject:
        """Explicit bulk edit of the counters, bypassing the attendance log."""

        attended, total = require_counters(attended_classes, total_classes)

        with self._transaction():
            self._require_owned(session, subject_id, for_update=True)
            self._subjects.update_counters(subject_id, attended_classes=attended, total_classes=total)

        logger.info("subject counters overridden subject_id=%s attended=%s total=%s", subject_id, attended, total)
        return self.get(session, subject_id)

    def delete(self, session: UserSession, subject_id: str) -> None:
        """Delete a subject together with its attendance records and timetable entries."""

        with self._transaction():
            self._require_owned(session, subject_id, for_update=True)
            records = self._attendance.delete_for_subject(subject_id)
            entries = self._timetable.delete_for_subject(subject_id)
            if not self._subjects.delete(subject_id):
                raise ValidationError("Failed to delete subject")

        logger.info(
            "subject deleted subject_id=%s records=%s timetable_entries=%s",
            subject_id,
            records,
            entries,
        )

    def reconcile_counters(self, session: UserSession, subject_id: str) -> Subject:
        """Rebuild the counters from the attendance log when they have drifted."""

        with self._transaction():
            subject = self._require_owned(session, subject_id, for_update=True)
            attended, total = replay_counters(self._attendance.list_for_subject(subject_id))
            if (attended, total) != (subject.attended_classes, subject.total_classes):
                logger.warning(
                    "counter drift subject_id=%s stored=%s/%s replayed=%s/%s",
                    subject_id,
                    subject.attended_classes,
                    subject.total_classes,
                    attended,
                    total,
                )
                self._subjects.update_counters(subject_id, attended_classes=attended, total_classes=total)

        return self.get(session, subject_id)

    def _require_owned(self, session: UserSession, subject_id: str, *, for_update: bool = False) -> Subject:
        subject = self._subjects.get_by_id(subject_id, user_id=session.user_id, for_update=for_update)
        if not subject:
            raise NotFoundError("Subject not found")
        return subject
