from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str, *, user_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_subject_and_date(self, subject_id: str, on: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_subject(self, subject_id: str) -> Sequence[AttendanceRecord]:
        """All records of a subject, newest date first."""

        raise NotImplementedError

    def list_for_subject_in_range(self, subject_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user_in_range(self, user_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(self, *, subject_id: str, user_id: str, on: date, status: AttendanceStatus) -> AttendanceRecord:
        raise NotImplementedError

    def update_status(self, record_id: str, *, status: AttendanceStatus) -> bool:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def delete_for_subject(self, subject_id: str) -> int:
        raise NotImplementedError
