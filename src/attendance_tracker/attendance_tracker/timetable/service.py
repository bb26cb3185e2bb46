from __future__ import annotations

import logging
from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..auth.session import UserSession
from ..common.datetime_utils import day_of_week, parse_clock
from ..common.validators import require_day_of_week, require_time_range
from ..core.exceptions import NotFoundError, ValidationError
from ..subjects.repository import SubjectRepository
from .model import TimetableEntry
from .repository import TimetableRepository

logger = logging.getLogger(__name__)


def _as_time(value, field_name: str) -> time:
    if isinstance(value, time):
        return value
    if not value:
        raise ValidationError(f"{field_name} is required")
    return parse_clock(value)


def group_by_day(entries: Iterable[TimetableEntry]) -> dict[int, list[TimetableEntry]]:
    """Keys 0..6 always present; each day sorted by start time."""

    grouped: dict[int, list[TimetableEntry]] = {day: [] for day in range(7)}
    for entry in entries:
        grouped[entry.day_of_week].append(entry)
    for day_entries in grouped.values():
        day_entries.sort(key=lambda e: e.start_time)
    return grouped


class TimetableService:
    def __init__(self, timetable: TimetableRepository, subjects: SubjectRepository):
        self._timetable = timetable
        self._subjects = subjects

    def list(self, session: UserSession, *, subject_id: Optional[str] = None) -> Sequence[TimetableEntry]:
        return self._timetable.list_for_user(session.user_id, subject_id=subject_id)

    def for_date(self, session: UserSession, on: date) -> Sequence[TimetableEntry]:
        return self._timetable.list_for_day(session.user_id, day_of_week(on))

    def weekly(self, session: UserSession) -> dict[int, list[TimetableEntry]]:
        return group_by_day(self.list(session))

    def create(self, session: UserSession, *, subject_id: str, day, start_time, end_time) -> TimetableEntry:
        day, start, end = self._validate(session, subject_id=subject_id, day=day, start_time=start_time, end_time=end_time)

        entry = self._timetable.create(subject_id=subject_id, day_of_week=day, start_time=start, end_time=end)
        logger.info("timetable entry created entry_id=%s subject_id=%s day=%s", entry.entry_id, subject_id, day)
        return entry

    def update(self, session: UserSession, entry_id: str, *, subject_id: str, day, start_time, end_time) -> TimetableEntry:
        self._require_entry(session, entry_id)
        day, start, end = self._validate(session, subject_id=subject_id, day=day, start_time=start_time, end_time=end_time)

        self._timetable.update(entry_id, subject_id=subject_id, day_of_week=day, start_time=start, end_time=end)
        return self._require_entry(session, entry_id)

    def delete(self, session: UserSession, entry_id: str) -> None:
        self._require_entry(session, entry_id)
        if not self._timetable.delete(entry_id):
            raise ValidationError("Failed to delete timetable entry")
        logger.info("timetable entry deleted entry_id=%s", entry_id)

    def _validate(self, session: UserSession, *, subject_id: str, day, start_time, end_time) -> tuple[int, time, time]:
        if not subject_id:
            raise ValidationError("Subject is required")
        day = require_day_of_week(day)
        start = _as_time(start_time, "Start time")
        end = _as_time(end_time, "End time")
        require_time_range(start, end)

        if not self._subjects.get_by_id(subject_id, user_id=session.user_id):
            raise NotFoundError("Subject not found")
        return day, start, end

    def _require_entry(self, session: UserSession, entry_id: str) -> TimetableEntry:
        entry = self._timetable.get_by_id(entry_id, user_id=session.user_id)
        if not entry:
            raise NotFoundError("Timetable entry not found")
        return entry
