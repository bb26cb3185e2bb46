"""Attendance percentage and projection arithmetic.

All functions are pure and work on plain integers so views, services and the
notification rules share one definition.

Projection semantics: the requirement is met when
``100 * attended >= required * total`` (an exact comparison, not the rounded
display percentage). ``percentage`` is for display only. With no recorded
classes the percentage is 0, so only a 0 % requirement is met.

Edge policy:
- ``required == 0``: always met; the miss allowance is unbounded (``None``).
- ``required == 100`` with any absence: the requirement can never be reached
  again (``None``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import WARNING_BAND
from ..core.enums import ProjectionKind, Standing


def percentage(attended: int, total: int) -> int:
    """Attendance percentage rounded to the nearest integer (halves round up)."""
    if total == 0:
        return 0
    return (200 * attended + total) // (2 * total)


def meets_requirement(attended: int, total: int, required: int) -> bool:
    if required <= 0:
        return True
    if total == 0:
        return False
    return 100 * attended >= required * total


def classes_can_miss(attended: int, total: int, required: int) -> Optional[int]:
    """Largest k such that missing the next k classes still meets ``required``.

    Returns None when the allowance is unbounded (required == 0).
    """
    if required <= 0:
        return None
    if not meets_requirement(attended, total, required):
        return 0
    return (100 * attended - required * total) // required


def classes_needed_to_attend(attended: int, total: int, required: int) -> Optional[int]:
    """Smallest n such that attending the next n classes meets ``required``.

    Returns None when the target is unreachable (required == 100 after an absence).
    """
    if meets_requirement(attended, total, required):
        return 0
    if total == 0:
        return 1
    if required >= 100:
        return None
    deficit = required * total - 100 * attended
    return -(-deficit // (100 - required))


def classes_can_miss_iterative(attended: int, total: int, required: int) -> Optional[int]:
    """Reference definition: add one missed class at a time until the requirement breaks."""
    if required <= 0:
        return None
    if not meets_requirement(attended, total, required):
        return 0
    missed = 0
    while meets_requirement(attended, total + missed + 1, required):
        missed += 1
    return missed


def classes_needed_to_attend_iterative(attended: int, total: int, required: int) -> Optional[int]:
    """Reference definition: attend one class at a time until the requirement holds."""
    if required >= 100 and attended < total:
        return None
    needed = 0
    while not meets_requirement(attended + needed, total + needed, required):
        needed += 1
    return needed


def _plural(count: int) -> str:
    return "class" if count == 1 else "classes"


@dataclass(frozen=True)
class Projection:
    kind: ProjectionKind
    count: Optional[int]
    message: str

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "count": self.count, "message": self.message}


def project(attended: int, total: int, required: int) -> Projection:
    """What the student can afford next: classes to miss or classes to attend."""

    if meets_requirement(attended, total, required):
        can_miss = classes_can_miss(attended, total, required)
        if can_miss is None:
            return Projection(ProjectionKind.UNLIMITED, None, "No attendance requirement set")
        if can_miss == 0:
            return Projection(ProjectionKind.CAN_MISS, 0, "Cannot miss any more classes")
        return Projection(ProjectionKind.CAN_MISS, can_miss, f"You can miss {can_miss} more {_plural(can_miss)}")

    needed = classes_needed_to_attend(attended, total, required)
    if needed is None:
        return Projection(ProjectionKind.UNREACHABLE, None, f"{required}% attendance can no longer be reached")
    return Projection(
        ProjectionKind.NEED_TO_ATTEND,
        needed,
        f"Need to attend {needed} more {_plural(needed)} consecutively",
    )


def standing(attended: int, total: int, required: int) -> Standing:
    """SAFE exactly when the requirement is met; the warning band uses the display percentage."""
    if meets_requirement(attended, total, required):
        return Standing.SAFE
    if percentage(attended, total) >= required - WARNING_BAND:
        return Standing.WARNING
    return Standing.DANGER
