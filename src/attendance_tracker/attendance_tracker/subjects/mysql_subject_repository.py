from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Subject
from .repository import SubjectRepository

_COLUMNS = """
    subject_id, user_id, name, code, total_classes, attended_classes,
    required_percentage, created_at, updated_at
"""


def _to_subject(r: dict) -> Subject:
    return Subject(
        subject_id=str(r["subject_id"]),
        user_id=str(r["user_id"]),
        name=r["name"],
        code=r.get("code"),
        total_classes=int(r["total_classes"]),
        attended_classes=int(r["attended_classes"]),
        required_percentage=int(r["required_percentage"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLSubjectRepository(SubjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: str) -> Sequence[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM subjects
                WHERE user_id=%s
                ORDER BY name ASC
                """,
                (user_id,),
            )
            return [_to_subject(r) for r in fetchall(cur)]

    def get_by_id(self, subject_id: str, *, user_id: str, for_update: bool = False) -> Optional[Subject]:
        lock = " FOR UPDATE" if for_update else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM subjects
                WHERE subject_id=%s AND user_id=%s{lock}
                """,
                (subject_id, user_id),
            )
            r = fetchone(cur)
            return _to_subject(r) if r else None

    def create(self, *, user_id: str, name: str, code: Optional[str], required_percentage: int) -> Subject:
        subject_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO subjects(subject_id, user_id, name, code, total_classes, attended_classes, required_percentage)
                VALUES(%s,%s,%s,%s,0,0,%s)
                """,
                (subject_id, user_id, name, code, int(required_percentage)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM subjects WHERE subject_id=%s", (subject_id,))
            return _to_subject(fetchone(cur))

    def update_details(
        self,
        subject_id: str,
        *,
        name: str,
        code: Optional[str],
        required_percentage: int,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET name=%s, code=%s, required_percentage=%s
                WHERE subject_id=%s
                """,
                (name, code, int(required_percentage), subject_id),
            )
            return cur.rowcount > 0

    def update_counters(self, subject_id: str, *, attended_classes: int, total_classes: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE subjects
                SET attended_classes=%s, total_classes=%s
                WHERE subject_id=%s
                """,
                (int(attended_classes), int(total_classes), subject_id),
            )
            return cur.rowcount > 0

    def delete(self, subject_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM subjects WHERE subject_id=%s", (subject_id,))
            return cur.rowcount > 0
