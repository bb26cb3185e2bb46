from __future__ import annotations

import uuid
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        email=row["email"],
        display_name=row["display_name"],
        password_hash=row["password_hash"],
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, display_name, password_hash FROM users WHERE email=%s",
                (email,),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, *, email: str, display_name: str, password_hash: str) -> str:
        user_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, email, display_name, password_hash)
                VALUES(%s,%s,%s,%s)
                """,
                (user_id, email, display_name, password_hash),
            )
            return user_id
