from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Sequence

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import month_bounds
from ..core.enums import AttendanceStatus, DayStatus


@dataclass(frozen=True)
class StatusCounts:
    present: int = 0
    absent: int = 0
    cancelled: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent + self.cancelled

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "cancelled": self.cancelled}


@dataclass(frozen=True)
class MonthlySummary:
    fully_attended: int = 0
    partially_attended: int = 0
    absent_days: int = 0
    cancelled_days: int = 0

    def to_dict(self) -> dict:
        return {
            "fully_attended": self.fully_attended,
            "partially_attended": self.partially_attended,
            "absent_days": self.absent_days,
            "cancelled_days": self.cancelled_days,
        }


@dataclass(frozen=True)
class CalendarDay:
    date: date
    status: DayStatus
    records: Sequence[AttendanceRecord] = field(default_factory=tuple)


def status_counts(records: Iterable[AttendanceRecord]) -> StatusCounts:
    counts = Counter(r.status for r in records)
    return StatusCounts(
        present=counts[AttendanceStatus.PRESENT],
        absent=counts[AttendanceStatus.ABSENT],
        cancelled=counts[AttendanceStatus.CANCELLED],
    )


def classify_day(records: Iterable[AttendanceRecord]) -> DayStatus:
    """Classify one day's records.

    Precedence is fixed (not a majority vote): cancelled-only, then fully
    attended, then partially attended, then absent.
    """

    c = status_counts(records)
    if c.cancelled > 0 and c.present == 0 and c.absent == 0:
        return DayStatus.CANCELLED
    if c.present > 0 and c.absent == 0:
        return DayStatus.FULLY_ATTENDED
    if c.present > 0 and c.absent > 0:
        return DayStatus.PARTIALLY_ATTENDED
    if c.absent > 0:
        return DayStatus.ABSENT
    return DayStatus.NONE


def group_by_date(records: Iterable[AttendanceRecord]) -> dict[date, list[AttendanceRecord]]:
    groups: dict[date, list[AttendanceRecord]] = {}
    for r in records:
        groups.setdefault(r.date, []).append(r)
    return groups


def group_by_subject(records: Iterable[AttendanceRecord]) -> dict[str, list[AttendanceRecord]]:
    groups: dict[str, list[AttendanceRecord]] = {}
    for r in records:
        groups.setdefault(r.subject_id, []).append(r)
    return groups


def monthly_summary(records: Iterable[AttendanceRecord]) -> MonthlySummary:
    tally = Counter(classify_day(day) for day in group_by_date(records).values())
    return MonthlySummary(
        fully_attended=tally[DayStatus.FULLY_ATTENDED],
        partially_attended=tally[DayStatus.PARTIALLY_ATTENDED],
        absent_days=tally[DayStatus.ABSENT],
        cancelled_days=tally[DayStatus.CANCELLED],
    )


def month_calendar(records: Iterable[AttendanceRecord], year: int, month: int) -> list[CalendarDay]:
    """One CalendarDay for every day of the month, in order."""

    start, end = month_bounds(year, month)
    by_date = group_by_date(records)
    days: list[CalendarDay] = []
    current = start
    while current <= end:
        day_records = tuple(by_date.get(current, ()))
        days.append(CalendarDay(date=current, status=classify_day(day_records), records=day_records))
        current += timedelta(days=1)
    return days


def replay_counters(records: Iterable[AttendanceRecord]) -> tuple[int, int]:
    """(attended, total) as the mark protocol would have produced them from the log."""

    c = status_counts(records)
    return c.present, c.total
