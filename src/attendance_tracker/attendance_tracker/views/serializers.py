from __future__ import annotations

from ..attendance.model import AttendanceRecord
from ..common.datetime_utils import format_clock
from ..core.constants import DAY_NAMES
from ..stats.aggregator import CalendarDay
from ..stats.calculator import percentage, project, standing
from ..subjects.model import Subject
from ..timetable.model import TimetableEntry


def subject_to_dict(s: Subject) -> dict:
    pct = percentage(s.attended_classes, s.total_classes)
    return {
        "id": s.subject_id,
        "name": s.name,
        "code": s.code,
        "total_classes": s.total_classes,
        "attended_classes": s.attended_classes,
        "required_percentage": s.required_percentage,
        "percentage": pct,
        "standing": standing(s.attended_classes, s.total_classes, s.required_percentage).value,
        "projection": project(s.attended_classes, s.total_classes, s.required_percentage).to_dict(),
    }


def record_to_dict(r: AttendanceRecord) -> dict:
    return {
        "id": r.record_id,
        "subject_id": r.subject_id,
        "date": r.date.isoformat(),
        "status": r.status.value,
        "created_at": r.created_at.isoformat() if r.created_at else None,
    }


def entry_to_dict(e: TimetableEntry) -> dict:
    return {
        "id": e.entry_id,
        "subject_id": e.subject_id,
        "subject_name": e.subject_name,
        "subject_code": e.subject_code,
        "day_of_week": e.day_of_week,
        "day_name": DAY_NAMES[e.day_of_week],
        "start_time": format_clock(e.start_time),
        "end_time": format_clock(e.end_time),
    }


def calendar_day_to_dict(d: CalendarDay) -> dict:
    return {
        "date": d.date.isoformat(),
        "status": d.status.value,
        "records": [record_to_dict(r) for r in d.records],
    }
