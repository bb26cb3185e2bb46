from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Optional

import mysql.connector

from ..core.exceptions import BackendError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success.

    Inside ``conn_factory.transaction()`` the pinned connection is reused and the
    commit is left to the transaction. Driver errors surface as BackendError.
    """

    pinned = conn_factory.pinned()
    if pinned is not None:
        cur = pinned.cursor(dictionary=dictionary)
        try:
            yield pinned, cur
        except mysql.connector.Error as e:
            raise BackendError(str(e)) from e
        finally:
            cur.close()
        return

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise BackendError(str(e)) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        conn.rollback()
        raise BackendError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[dict]:
    return cur.fetchone() or None


def fetchall(cur) -> list[dict]:
    return list(cur.fetchall() or ())


def as_clock(value: Any) -> Optional[time]:
    """TIME column value as ``datetime.time``.

    The pure-Python connector hands TIME back as a ``timedelta`` since midnight;
    other drivers return ``time`` objects or "HH:MM:SS" strings.
    """

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds % 3600 // 60, seconds % 60)
    if isinstance(value, str):
        return time.fromisoformat(value.strip())
    raise TypeError(f"Unsupported TIME value: {value!r}")
