from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one status event for one subject on one calendar date."""

    record_id: str
    subject_id: str
    user_id: str
    date: date
    status: AttendanceStatus
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MarkResult:
    """Outcome of a mark: the stored record and the subject counters after the delta."""

    record: AttendanceRecord
    previous_status: Optional[AttendanceStatus]
    attended_classes: int
    total_classes: int
