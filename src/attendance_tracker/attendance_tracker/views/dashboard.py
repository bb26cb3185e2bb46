from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional

from ..attendance.model import MarkResult
from ..attendance.service import AttendanceService
from ..auth.session import UserSession
from ..common.validators import require_status
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..subjects.service import SubjectService
from ..timetable.service import TimetableService
from .serializers import entry_to_dict, record_to_dict, subject_to_dict


class DashboardView:
    """Today's classes, the subjects they belong to and quick marking."""

    def __init__(self, subjects: SubjectService, timetable: TimetableService, attendance: AttendanceService):
        self._subjects = subjects
        self._timetable = timetable
        self._attendance = attendance

    def load(self, session: UserSession, *, today: Optional[date] = None) -> dict:
        today = today or date.today()

        with ThreadPoolExecutor(max_workers=3) as executor:
            entries_f = executor.submit(self._timetable.for_date, session, today)
            subjects_f = executor.submit(self._subjects.list, session)
            records_f = executor.submit(self._attendance.list_in_range, session, start=today, end=today)
            entries, subjects, records = entries_f.result(), subjects_f.result(), records_f.result()

        marked = {r.subject_id: r for r in records}
        today_ids = {e.subject_id for e in entries}

        classes = []
        for e in entries:
            item = entry_to_dict(e)
            record = marked.get(e.subject_id)
            item["today_status"] = record.status.value if record else None
            classes.append(item)

        today_subjects = []
        for s in subjects:
            if s.subject_id not in today_ids:
                continue
            item = subject_to_dict(s)
            record = marked.get(s.subject_id)
            item["today_record"] = record_to_dict(record) if record else None
            today_subjects.append(item)

        return {
            "date": today.isoformat(),
            "classes": classes,
            "subjects": today_subjects,
            "total_subjects": len(subjects),
        }

    def mark_today(self, session: UserSession, subject_id: str, status, *, today: Optional[date] = None) -> MarkResult:
        """Quick mark from the dashboard: present or absent for today only."""

        status = require_status(status)
        if status not in (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT):
            raise ValidationError("Status must be present or absent")
        return self._attendance.mark(session, subject_id, today or date.today(), status)
