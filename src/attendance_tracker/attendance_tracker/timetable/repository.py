from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from .model import TimetableEntry


class TimetableRepository(Protocol):
    def list_for_user(self, user_id: str, *, subject_id: Optional[str] = None) -> Sequence[TimetableEntry]:
        """Entries (joined with subject name/code) ordered by day_of_week, start_time."""

        raise NotImplementedError

    def list_for_day(self, user_id: str, day_of_week: int) -> Sequence[TimetableEntry]:
        raise NotImplementedError

    def get_by_id(self, entry_id: str, *, user_id: str) -> Optional[TimetableEntry]:
        raise NotImplementedError

    def create(self, *, subject_id: str, day_of_week: int, start_time: time, end_time: time) -> TimetableEntry:
        raise NotImplementedError

    def update(
        self,
        entry_id: str,
        *,
        subject_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
    ) -> bool:
        raise NotImplementedError

    def delete(self, entry_id: str) -> bool:
        raise NotImplementedError

    def delete_for_subject(self, subject_id: str) -> int:
        raise NotImplementedError
