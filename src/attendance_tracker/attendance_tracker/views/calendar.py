from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional

from ..attendance.service import AttendanceService
from ..auth.session import UserSession
from ..common.datetime_utils import month_bounds, shift_month
from ..stats.aggregator import month_calendar, monthly_summary
from ..subjects.service import SubjectService
from .serializers import calendar_day_to_dict

ALL_SUBJECTS = "all"


class CalendarView:
    def __init__(self, subjects: SubjectService, attendance: AttendanceService):
        self._subjects = subjects
        self._attendance = attendance

    def month(
        self,
        session: UserSession,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
        subject: Optional[str] = None,
    ) -> dict:
        """Month grid for one subject or for all of them (``subject`` is ``"all"`` or an id)."""

        today = date.today()
        year = year or today.year
        month = month or today.month
        start, end = month_bounds(year, month)
        subject_id = None if not subject or subject == ALL_SUBJECTS else subject

        with ThreadPoolExecutor(max_workers=2) as executor:
            subjects_f = executor.submit(self._subjects.list, session)
            records_f = executor.submit(
                self._attendance.list_in_range, session, start=start, end=end, subject_id=subject_id
            )
            subjects, records = subjects_f.result(), records_f.result()

        prev_year, prev_month = shift_month(year, month, -1)
        next_year, next_month = shift_month(year, month, 1)
        return {
            "year": year,
            "month": month,
            "subject": subject_id or ALL_SUBJECTS,
            "subjects": [{"id": s.subject_id, "name": s.name, "code": s.code} for s in subjects],
            "days": [calendar_day_to_dict(d) for d in month_calendar(records, year, month)],
            "summary": monthly_summary(records).to_dict(),
            "previous": {"year": prev_year, "month": prev_month},
            "next": {"year": next_year, "month": next_month},
        }
