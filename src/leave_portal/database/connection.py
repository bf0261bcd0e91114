from __future__ import annotations

import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Optional

import mysql.connector

from ..core.exceptions import StoreError

logger = logging.getLogger(__name__)


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection(ABC):
    """Connection factory shared by every repository of one store.

    Repositories open a short-lived connection per operation. Inside
    ``transaction()`` the same connection is pinned for the current thread so
    that several repository calls commit or roll back together.
    """

    backend: str = ""
    driver_errors: tuple[type[BaseException], ...] = ()

    def __init__(self) -> None:
        self._local = threading.local()
        self._closed = False

    @abstractmethod
    def _open(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def cursor(self, conn: Any) -> Any:
        """Return a cursor yielding rows as dicts and accepting ``%s`` placeholders."""

        raise NotImplementedError

    def connect(self) -> Any:
        if self._closed:
            raise StoreError(f"{self.backend} store is closed")
        try:
            return self._open()
        except self.driver_errors as e:
            logger.error("Could not connect to %s store: %s", self.backend, e)
            raise StoreError(f"Could not connect to {self.backend} store") from e

    def active(self) -> Optional[Any]:
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        current = self.active()
        if current is not None:
            # Nested blocks join the outer unit of work.
            yield current
            return

        conn = self.connect()
        self._local.conn = conn
        try:
            yield conn
            conn.commit()
        except Exception as exc:
            conn.rollback()
            if isinstance(exc, self.driver_errors):
                raise StoreError(str(exc)) from exc
            raise
        finally:
            self._local.conn = None
            conn.close()

    def close(self) -> None:
        self._closed = True


class MySQLConnection(DatabaseConnection):
    """Hosted store backed by a MySQL server."""

    backend = "mysql"
    driver_errors = (mysql.connector.Error,)

    def __init__(self, config: DBConfig):
        super().__init__()
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def _open(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def cursor(self, conn):
        return conn.cursor(dictionary=True)


class _SQLiteCursor:
    """Adapts sqlite3 cursors to the ``%s`` placeholders used by the repositories."""

    def __init__(self, cur: sqlite3.Cursor):
        self._cur = cur

    def execute(self, sql: str, params: tuple = ()) -> None:
        self._cur.execute(sql.replace("%s", "?"), params)

    def fetchone(self) -> Optional[dict]:
        row = self._cur.fetchone()
        return dict(row) if row is not None else None

    def fetchall(self) -> list[dict]:
        return [dict(r) for r in self._cur.fetchall()]

    @property
    def lastrowid(self) -> Optional[int]:
        return self._cur.lastrowid

    @property
    def rowcount(self) -> int:
        return self._cur.rowcount

    def close(self) -> None:
        self._cur.close()


class SQLiteConnection(DatabaseConnection):
    """Embedded store backed by a SQLite file."""

    backend = "sqlite"
    driver_errors = (sqlite3.Error,)

    def __init__(self, path: str | Path):
        super().__init__()
        self._path = str(path)

    @property
    def path(self) -> str:
        return self._path

    def _open(self):
        conn = sqlite3.connect(self._path, timeout=10)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def cursor(self, conn):
        return _SQLiteCursor(conn.cursor())


def build_connection(settings: Any) -> DatabaseConnection:
    backend = str(getattr(settings, "DB_BACKEND", "sqlite")).lower()
    if backend == "mysql":
        db_config = dict(getattr(settings, "DB_CONFIG"))
        return MySQLConnection(
            DBConfig(
                host=str(db_config["host"]),
                port=int(db_config.get("port", 3306)),
                user=str(db_config["user"]),
                password=str(db_config["password"]),
                database=str(db_config["database"]),
            )
        )
    if backend == "sqlite":
        return SQLiteConnection(getattr(settings, "SQLITE_PATH", "leave_portal.db"))
    raise ValueError(f"Unsupported DB_BACKEND: {backend!r}")
