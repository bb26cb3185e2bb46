from __future__ import annotations

from datetime import time
from typing import Optional

from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_int(value, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number")


_TRUE_WORDS = {"1", "true", "yes", "on"}
_FALSE_WORDS = {"0", "false", "no", "off"}


def require_bool(value, field_name: str) -> bool:
    """Accept JSON booleans, 0/1 and the usual form words ("true", "off", ...)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise ValidationError(f"{field_name} must be true or false")


def require_percentage(value, field_name: str = "Required percentage") -> int:
    pct = require_int(value, field_name)
    if pct < 0 or pct > 100:
        raise ValidationError(f"{field_name} must be between 0 and 100")
    return pct


def require_counters(attended, total) -> tuple[int, int]:
    """Validate a manual counter override: both >= 0 and attended <= total."""

    attended = require_int(attended, "Attended classes")
    total = require_int(total, "Total classes")
    if attended < 0 or total < 0:
        raise ValidationError("Class counts cannot be negative")
    if attended > total:
        raise ValidationError("Attended classes cannot be more than total classes")
    return attended, total


def require_day_of_week(value) -> int:
    day = require_int(value, "Day of week")
    if day < 0 or day > 6:
        raise ValidationError("Day of week must be between 0 (Sunday) and 6 (Saturday)")
    return day


def require_time_range(start: time, end: time) -> None:
    if end <= start:
        raise ValidationError("End time must be after start time")


def require_status(value) -> AttendanceStatus:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(str(value or "").strip().lower())
    except ValueError:
        raise ValidationError("Status must be one of: present, absent, cancelled")
