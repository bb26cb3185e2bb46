from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from ..auth.session import UserSession
from ..core.constants import DAY_NAMES
from ..subjects.service import SubjectService
from ..timetable.service import TimetableService
from .serializers import entry_to_dict


class TimetableView:
    def __init__(self, timetable: TimetableService, subjects: SubjectService):
        self._timetable = timetable
        self._subjects = subjects

    def weekly(self, session: UserSession) -> dict:
        """Seven days (Sunday first), each with its slots sorted by start time."""

        with ThreadPoolExecutor(max_workers=2) as executor:
            grouped_f = executor.submit(self._timetable.weekly, session)
            subjects_f = executor.submit(self._subjects.list, session)
            grouped, subjects = grouped_f.result(), subjects_f.result()

        return {
            "days": [
                {"day_of_week": day, "day_name": DAY_NAMES[day], "entries": [entry_to_dict(e) for e in grouped[day]]}
                for day in range(7)
            ],
            "subjects": [{"id": s.subject_id, "name": s.name, "code": s.code} for s in subjects],
        }
