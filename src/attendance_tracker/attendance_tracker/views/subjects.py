from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from ..attendance.service import AttendanceService
from ..auth.session import UserSession
from ..core.constants import DEFAULT_RECENT_RECORDS
from ..stats.aggregator import status_counts
from ..subjects.service import SubjectService
from .serializers import record_to_dict, subject_to_dict


class SubjectView:
    def __init__(self, subjects: SubjectService, attendance: AttendanceService, *, recent_limit: int = DEFAULT_RECENT_RECORDS):
        self._subjects = subjects
        self._attendance = attendance
        self._recent_limit = recent_limit

    def list(self, session: UserSession) -> list[dict]:
        return [subject_to_dict(s) for s in self._subjects.list(session)]

    def detail(self, session: UserSession, subject_id: str) -> dict:
        """Subject with its counts per status, projection and most recent records."""

        with ThreadPoolExecutor(max_workers=2) as executor:
            subject_f = executor.submit(self._subjects.get, session, subject_id)
            records_f = executor.submit(self._attendance.list_for_subject, session, subject_id)
            subject, records = subject_f.result(), records_f.result()

        return {
            "subject": subject_to_dict(subject),
            "counts": status_counts(records).to_dict(),
            "recent_records": [record_to_dict(r) for r in records[: self._recent_limit]],
        }
