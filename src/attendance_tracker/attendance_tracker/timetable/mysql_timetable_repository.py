from __future__ import annotations

import uuid
from datetime import time
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, as_clock
from .model import TimetableEntry
from .repository import TimetableRepository

_SELECT = """
    SELECT te.entry_id, te.subject_id, te.day_of_week, te.start_time, te.end_time,
           s.name AS subject_name, s.code AS subject_code
    FROM timetable_entries te
    JOIN subjects s ON s.subject_id = te.subject_id
"""


def _to_entry(r: dict) -> TimetableEntry:
    return TimetableEntry(
        entry_id=str(r["entry_id"]),
        subject_id=str(r["subject_id"]),
        day_of_week=int(r["day_of_week"]),
        start_time=as_clock(r["start_time"]),
        end_time=as_clock(r["end_time"]),
        subject_name=r.get("subject_name"),
        subject_code=r.get("subject_code"),
    )


class MySQLTimetableRepository(TimetableRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str, *, subject_id: Optional[str] = None) -> Sequence[TimetableEntry]:
        clauses = ["s.user_id=%s"]
        params: list[object] = [user_id]
        if subject_id is not None:
            clauses.append("te.subject_id=%s")
            params.append(subject_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE {where}
                ORDER BY te.day_of_week ASC, te.start_time ASC
                """,
                tuple(params),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def list_for_day(self, user_id: str, day_of_week: int) -> Sequence[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE s.user_id=%s AND te.day_of_week=%s
                ORDER BY te.start_time ASC
                """,
                (user_id, int(day_of_week)),
            )
            return [_to_entry(r) for r in fetchall(cur)]

    def get_by_id(self, entry_id: str, *, user_id: str) -> Optional[TimetableEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE te.entry_id=%s AND s.user_id=%s
                """,
                (entry_id, user_id),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create(self, *, subject_id: str, day_of_week: int, start_time: time, end_time: time) -> TimetableEntry:
        entry_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timetable_entries(entry_id, subject_id, day_of_week, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (entry_id, subject_id, int(day_of_week), start_time, end_time),
            )
            cur.execute(f"{_SELECT} WHERE te.entry_id=%s", (entry_id,))
            return _to_entry(fetchone(cur))

    def update(
        self,
        entry_id: str,
        *,
        subject_id: str,
        day_of_week: int,
        start_time: time,
        end_time: time,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE timetable_entries
                SET subject_id=%s, day_of_week=%s, start_time=%s, end_time=%s
                WHERE entry_id=%s
                """,
                (subject_id, int(day_of_week), start_time, end_time, entry_id),
            )
            return cur.rowcount > 0

    def delete(self, entry_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetable_entries WHERE entry_id=%s", (entry_id,))
            return cur.rowcount > 0

    def delete_for_subject(self, subject_id: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timetable_entries WHERE subject_id=%s", (subject_id,))
            return int(cur.rowcount)
