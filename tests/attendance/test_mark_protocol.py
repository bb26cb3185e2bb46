from __future__ import annotations

from datetime import date

import pytest

from src.attendance_tracker.attendance_tracker.attendance.service import AttendanceService
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus
from src.attendance_tracker.attendance_tracker.core.exceptions import BackendError, NotFoundError, ValidationError
from tests.fakes import InMemoryAttendance, InMemorySubjects, SnapshotTransaction, make_session

DAY = date(2026, 3, 2)


def _build(**subject_kwargs):
    subjects = InMemorySubjects()
    attendance = InMemoryAttendance()
    tx = SnapshotTransaction(subjects, attendance)
    subject = subjects.add(**subject_kwargs)
    return AttendanceService(attendance, subjects, transaction=tx), subjects, attendance, subject, tx


def _counters(subjects, subject):
    s = subjects.rows[subject.subject_id]
    return s.attended_classes, s.total_classes


def test_first_mark_present_counts_attended_and_total():
    svc, subjects, _, subject, tx = _build()
    result = svc.mark(make_session(), subject.subject_id, DAY, "present")

    assert (result.attended_classes, result.total_classes) == (1, 1)
    assert _counters(subjects, subject) == (1, 1)
    assert result.previous_status is None
    assert tx.committed == 1


def test_first_mark_absent_counts_total_only():
    svc, subjects, _, subject, _ = _build()
    svc.mark(make_session(), subject.subject_id, DAY, AttendanceStatus.ABSENT)
    assert _counters(subjects, subject) == (0, 1)


def test_remark_present_as_absent_keeps_total():
    svc, subjects, attendance, subject, _ = _build()
    session = make_session()
    svc.mark(session, subject.subject_id, DAY, "present")
    result = svc.mark(session, subject.subject_id, DAY, "absent")

    assert result.previous_status == AttendanceStatus.PRESENT
    assert _counters(subjects, subject) == (0, 1)
    assert len(attendance.rows) == 1
    assert next(iter(attendance.rows.values())).status == AttendanceStatus.ABSENT


def test_remark_same_status_is_a_noop():
    svc, subjects, _, subject, _ = _build()
    session = make_session()
    svc.mark(session, subject.subject_id, DAY, "present")
    writes = subjects.counter_writes
    svc.mark(session, subject.subject_id, DAY, "present")

    assert _counters(subjects, subject) == (1, 1)
    assert subjects.counter_writes == writes


def test_cancelled_counts_towards_total():
    svc, subjects, _, subject, _ = _build()
    svc.mark(make_session(), subject.subject_id, DAY, "cancelled")
    assert _counters(subjects, subject) == (0, 1)


def test_delete_present_record_decrements_both():
    svc, subjects, attendance, subject, _ = _build()
    session = make_session()
    result = svc.mark(session, subject.subject_id, DAY, "present")
    svc.mark(session, subject.subject_id, date(2026, 3, 3), "absent")

    after = svc.delete(session, result.record.record_id)

    assert (after.attended_classes, after.total_classes) == (0, 1)
    assert _counters(subjects, subject) == (0, 1)
    assert len(attendance.rows) == 1


def test_delete_on_empty_counters_is_not_an_error():
    svc, subjects, attendance, subject, _ = _build()
    record = attendance.add(subject, DAY, AttendanceStatus.PRESENT)

    after = svc.delete(make_session(), record.record_id)

    assert (after.attended_classes, after.total_classes) == (0, 0)
    assert subjects.counter_writes == 0
    assert attendance.rows == {}


def test_failed_counter_write_rolls_back_the_record():
    svc, subjects, attendance, subject, tx = _build()
    subjects.fail_counter_writes = True

    with pytest.raises(BackendError):
        svc.mark(make_session(), subject.subject_id, DAY, "present")

    assert attendance.rows == {}
    assert _counters(subjects, subject) == (0, 0)
    assert tx.rolled_back == 1


def test_unknown_status_is_rejected_before_any_write():
    svc, _, attendance, subject, tx = _build()
    with pytest.raises(ValidationError):
        svc.mark(make_session(), subject.subject_id, DAY, "late")
    assert attendance.rows == {}
    assert tx.committed == 0


def test_other_users_subject_is_not_found():
    svc, _, _, subject, _ = _build()
    with pytest.raises(NotFoundError):
        svc.mark(make_session("someone-else"), subject.subject_id, DAY, "present")


def test_list_in_range_rejects_reversed_bounds():
    svc, _, _, subject, _ = _build()
    with pytest.raises(ValidationError):
        svc.list_in_range(make_session(), start=date(2026, 3, 5), end=date(2026, 3, 1), subject_id=subject.subject_id)


def test_history_is_newest_first():
    svc, _, _, subject, _ = _build()
    session = make_session()
    for day in (2, 4, 3):
        svc.mark(session, subject.subject_id, date(2026, 3, day), "present")

    history = svc.list_for_subject(session, subject.subject_id)
    assert [r.date.day for r in history] == [4, 3, 2]
    assert svc.get_for_date(session, subject.subject_id, date(2026, 3, 3)).status == AttendanceStatus.PRESENT
