"""Compensating counter deltas for the attendance mark/delete protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class CounterDelta:
    attended: int = 0
    total: int = 0

    @property
    def is_zero(self) -> bool:
        return self.attended == 0 and self.total == 0


def mark_delta(old: Optional[AttendanceStatus], new: AttendanceStatus) -> CounterDelta:
    """Delta for marking ``new`` over ``old`` (None = no record for that date yet)."""

    if old is None:
        return CounterDelta(attended=1 if new == AttendanceStatus.PRESENT else 0, total=1)

    if old != AttendanceStatus.PRESENT and new == AttendanceStatus.PRESENT:
        return CounterDelta(attended=1)
    if old == AttendanceStatus.PRESENT and new != AttendanceStatus.PRESENT:
        return CounterDelta(attended=-1)
    return CounterDelta()


def delete_delta(old: AttendanceStatus) -> CounterDelta:
    return CounterDelta(attended=-1 if old == AttendanceStatus.PRESENT else 0, total=-1)


def apply_delta(attended: int, total: int, delta: CounterDelta) -> tuple[int, int]:
    """New (attended, total); neither goes below 0 and attended never exceeds total."""
    total = max(0, total + delta.total)
    return min(total, max(0, attended + delta.attended)), total
