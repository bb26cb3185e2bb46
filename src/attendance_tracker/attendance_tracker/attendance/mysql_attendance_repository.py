from __future__ import annotations

import uuid
from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=str(r["record_id"]),
        subject_id=str(r["subject_id"]),
        user_id=str(r["user_id"]),
        date=r["date"],
        status=AttendanceStatus(r["status"]),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str, *, user_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, subject_id, user_id, date, status, created_at
                FROM attendance_records
                WHERE record_id=%s AND user_id=%s
                """,
                (record_id, user_id),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_subject_and_date(self, subject_id: str, on: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, subject_id, user_id, date, status, created_at
                FROM attendance_records
                WHERE subject_id=%s AND date=%s
                """,
                (subject_id, on),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_subject(self, subject_id: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, subject_id, user_id, date, status, created_at
                FROM attendance_records
                WHERE subject_id=%s
                ORDER BY date DESC
                """,
                (subject_id,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_subject_in_range(self, subject_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, subject_id, user_id, date, status, created_at
                FROM attendance_records
                WHERE subject_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (subject_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_user_in_range(self, user_id: str, *, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT record_id, subject_id, user_id, date, status, created_at
                FROM attendance_records
                WHERE user_id=%s AND date BETWEEN %s AND %s
                ORDER BY date ASC
                """,
                (user_id, start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def create(self, *, subject_id: str, user_id: str, on: date, status: AttendanceStatus) -> AttendanceRecord:
        record_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(record_id, subject_id, user_id, date, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (record_id, subject_id, user_id, on, status.value),
            )
            cur.execute(
                """
                SELECT record_id, subject_id, user_id, date, status, created_at
                FROM attendance_records
                WHERE record_id=%s
                """,
                (record_id,),
            )
            return _to_record(fetchone(cur))

    def update_status(self, record_id: str, *, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s WHERE record_id=%s",
                (status.value, record_id),
            )
            return cur.rowcount > 0

    def delete(self, record_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (record_id,))
            return cur.rowcount > 0

    def delete_for_subject(self, subject_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE subject_id=%s", (subject_id,))
            return int(cur.rowcount)
