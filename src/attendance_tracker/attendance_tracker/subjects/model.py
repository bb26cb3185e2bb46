from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import DEFAULT_REQUIRED_PERCENTAGE


@dataclass(frozen=True)
class Subject:
    """Domain entity: a course being tracked.

    Counters are owned by the subject but only moved by the attendance
    mark/delete protocol (or an explicit counter override).
    """

    subject_id: str
    user_id: str
    name: str
    code: Optional[str]
    total_classes: int = 0
    attended_classes: int = 0
    required_percentage: int = DEFAULT_REQUIRED_PERCENTAGE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
