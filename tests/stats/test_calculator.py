from __future__ import annotations

import pytest

from src.attendance_tracker.attendance_tracker.core.enums import ProjectionKind, Standing
from src.attendance_tracker.attendance_tracker.stats.calculator import (
    classes_can_miss,
    classes_can_miss_iterative,
    classes_needed_to_attend,
    classes_needed_to_attend_iterative,
    meets_requirement,
    percentage,
    project,
    standing,
)


@pytest.mark.parametrize(
    "attended,total,expected",
    [(0, 0, 0), (3, 4, 75), (1, 3, 33), (2, 3, 67), (1, 8, 13), (40, 40, 100), (0, 5, 0)],
)
def test_percentage_rounds_to_nearest(attended, total, expected):
    assert percentage(attended, total) == expected


def test_scenario_exactly_at_requirement_cannot_miss():
    assert percentage(30, 40) == 75
    assert classes_can_miss(30, 40, 75) == 0
    assert classes_needed_to_attend(30, 40, 75) == 0


def test_scenario_half_attendance_needs_forty_in_a_row():
    assert percentage(20, 40) == 50
    assert classes_needed_to_attend(20, 40, 75) == 40
    assert classes_can_miss(20, 40, 75) == 0


def test_can_miss_counts_extra_absences():
    # 36/40 = 90%; 36/48 = 75% still meets, 36/49 does not
    assert classes_can_miss(36, 40, 75) == 8


def test_closed_and_iterative_forms_agree():
    for total in range(0, 31):
        for attended in range(0, total + 1):
            for required in range(1, 100):
                assert classes_needed_to_attend(attended, total, required) == classes_needed_to_attend_iterative(
                    attended, total, required
                ), (attended, total, required)
                assert classes_can_miss(attended, total, required) == classes_can_miss_iterative(
                    attended, total, required
                ), (attended, total, required)


def test_zero_requirement_is_unbounded():
    assert meets_requirement(0, 10, 0)
    assert classes_can_miss(0, 10, 0) is None
    assert classes_can_miss_iterative(0, 10, 0) is None
    assert classes_needed_to_attend(0, 10, 0) == 0


def test_full_requirement_after_an_absence_is_unreachable():
    assert classes_needed_to_attend(9, 10, 100) is None
    assert classes_needed_to_attend_iterative(9, 10, 100) is None
    assert classes_can_miss(10, 10, 100) == 0
    assert classes_needed_to_attend(10, 10, 100) == 0


def test_no_classes_yet_needs_one():
    assert not meets_requirement(0, 0, 75)
    assert classes_needed_to_attend(0, 0, 75) == 1
    assert classes_can_miss(0, 0, 75) == 0


def test_requirement_uses_exact_ratio_not_rounded_percentage():
    # 149/200 = 74.5% displays as 75 but does not meet 75%
    assert percentage(149, 200) == 75
    assert not meets_requirement(149, 200, 75)
    assert classes_needed_to_attend(149, 200, 75) == 4


def test_project_messages():
    assert project(36, 40, 75).to_dict() == {"kind": "can_miss", "count": 8, "message": "You can miss 8 more classes"}
    assert project(30, 40, 75).message == "Cannot miss any more classes"
    assert project(20, 40, 75).message == "Need to attend 40 more classes consecutively"
    assert project(0, 0, 75).message == "Need to attend 1 more class consecutively"
    assert project(5, 5, 0).kind == ProjectionKind.UNLIMITED
    assert project(9, 10, 100).kind == ProjectionKind.UNREACHABLE
    assert project(9, 10, 100).count is None


@pytest.mark.parametrize(
    "attended,total,required,expected",
    [
        (3, 4, 75, Standing.SAFE),
        (74, 100, 75, Standing.WARNING),
        (65, 100, 75, Standing.WARNING),
        (64, 100, 75, Standing.DANGER),
        (0, 0, 75, Standing.DANGER),
        (0, 0, 0, Standing.SAFE),
    ],
)
def test_standing_bands(attended, total, required, expected):
    assert standing(attended, total, required) == expected


def test_standing_and_projection_agree_at_rounding_boundary():
    # 74.5% shows as 75 but is still short of 75%
    assert percentage(149, 200) == 75
    assert standing(149, 200, 75) == Standing.WARNING
    assert project(149, 200, 75).kind == ProjectionKind.NEED_TO_ATTEND
    assert project(149, 200, 75).count == 4

    assert standing(150, 200, 75) == Standing.SAFE
    assert project(150, 200, 75).kind == ProjectionKind.CAN_MISS


def test_standing_is_safe_exactly_when_nothing_more_is_needed():
    for required in (1, 50, 75, 99, 100):
        for total in range(0, 25):
            for attended in range(0, total + 1):
                safe = standing(attended, total, required) == Standing.SAFE
                assert safe == (classes_needed_to_attend(attended, total, required) == 0)
