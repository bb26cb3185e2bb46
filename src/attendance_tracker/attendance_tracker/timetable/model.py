from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from typing import Optional


@dataclass(frozen=True)
class TimetableEntry:
    """A recurring weekly class slot (day_of_week: 0=Sunday..6=Saturday)."""

    entry_id: str
    subject_id: str
    day_of_week: int
    start_time: time
    end_time: time
    subject_name: Optional[str] = None
    subject_code: Optional[str] = None
