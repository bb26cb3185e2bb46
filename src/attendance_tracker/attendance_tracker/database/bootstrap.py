"""Schema bootstrap for local development and tests against a real server."""

from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterator

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b.*?;\s*$")
_SQL_TOKEN = re.compile(r"'(?:\\.|[^'\\])*'|\"(?:\\.|[^\"\\])*\"|--[^\n]*|;|[^'\";-]+|-", re.S)


def _target(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "attendance_tracker")),
    )


def _open(target: DBConfig, *, with_database: bool = True):
    return mysql.connector.connect(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        database=target.database if with_database else None,
        use_pure=True,
    )


def _strip_create_db_and_use(sql: str) -> str:
    """Drop CREATE DATABASE / USE lines so the script runs against any database name."""
    return _CREATE_DB_OR_USE.sub("", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on top-level ``;``; quoted text is kept and ``--`` comments dropped."""

    buf: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token.startswith("--"):
            continue
        if token != ";":
            buf.append(token)
            continue
        stmt = "".join(buf).strip()
        buf.clear()
        if stmt:
            yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = _target(db_config)
    conn = _open(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _open(_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("schema applied from %s", schema_path)


def ensure_demo_user(db_config: dict, *, email: str = "demo@example.com", password: str = "demo1234") -> None:
    """Create (or reset the password of) a demo login."""

    conn = _open(_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)
        password_hash = generate_password_hash(password)
        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        if cur.fetchone():
            cur.execute("UPDATE users SET password_hash=%s WHERE email=%s", (password_hash, email))
        else:
            cur.execute(
                "INSERT INTO users (user_id, email, display_name, password_hash) VALUES (%s, %s, %s, %s)",
                (str(uuid.uuid4()), email, "Demo Student", password_hash),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _open(_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
