from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig, MySQLConnection

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent / "schema"

DEMO_USERS = (
    ("hod", "hod123", Role.HOD),
    ("alice", "alice123", Role.EMPLOYEE),
    ("bob", "bob123", Role.EMPLOYEE),
)


def schema_path_for(backend: str) -> Path:
    return SCHEMA_DIR / f"{backend}.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema files compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes, drops '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            continue

        if ch == "-" and not in_single and not in_double and buf and buf[-1] == "-":
            buf.pop()
            in_comment = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = mysql.connector.connect(
        host=config.host,
        port=int(config.port),
        user=config.user,
        password=config.password,
        use_pure=True,
    )
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection, *, schema_path: Optional[str | Path] = None) -> None:
    if isinstance(conn_factory, MySQLConnection):
        ensure_database_exists(conn_factory.config)

    schema_path = Path(schema_path) if schema_path else schema_path_for(conn_factory.backend)
    sql = _strip_create_db_and_use(schema_path.read_text(encoding="utf-8"))

    with conn_factory.transaction() as conn:
        cur = conn_factory.cursor(conn)
        try:
            for stmt in _iter_sql_statements(sql):
                cur.execute(stmt)
        finally:
            cur.close()
    logger.info("Applied %s to %s store", schema_path.name, conn_factory.backend)


def ensure_demo_users(conn_factory: DatabaseConnection) -> None:
    with conn_factory.transaction() as conn:
        cur = conn_factory.cursor(conn)
        try:
            for username, password, role in DEMO_USERS:
                password_hash = generate_password_hash(password)
                cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
                if cur.fetchone():
                    cur.execute(
                        "UPDATE users SET password_hash=%s, role=%s WHERE username=%s",
                        (password_hash, role.value, username),
                    )
                else:
                    cur.execute(
                        "INSERT INTO users(username, password_hash, role) VALUES(%s,%s,%s)",
                        (username, password_hash, role.value),
                    )
        finally:
            cur.close()
    logger.info("Demo users ready: %s", ", ".join(u for u, _, _ in DEMO_USERS))


def list_tables(conn_factory: DatabaseConnection) -> list[str]:
    if conn_factory.backend == "sqlite":
        sql = "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    else:
        sql = "SELECT table_name AS name FROM information_schema.tables WHERE table_schema=DATABASE() ORDER BY table_name"

    with conn_factory.transaction() as conn:
        cur = conn_factory.cursor(conn)
        try:
            cur.execute(sql)
            return [row["name"] for row in cur.fetchall()]
        finally:
            cur.close()
