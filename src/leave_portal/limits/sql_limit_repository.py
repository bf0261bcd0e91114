from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LimitType
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone
from .model import MonthlyLimit
from .repository import LimitRepository


class SQLLimitRepository(LimitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, limit_type: LimitType) -> Optional[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT value FROM monthly_limits WHERE limit_type=%s", (LimitType(limit_type).value,))
            r = fetchone(cur)
            return int(r["value"]) if r else None

    def upsert(self, limit_type: LimitType, value: int) -> None:
        key = LimitType(limit_type).value
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT limit_type FROM monthly_limits WHERE limit_type=%s", (key,))
            if fetchone(cur):
                cur.execute("UPDATE monthly_limits SET value=%s WHERE limit_type=%s", (int(value), key))
            else:
                cur.execute("INSERT INTO monthly_limits(limit_type, value) VALUES(%s,%s)", (key, int(value)))

    def list_all(self) -> Sequence[MonthlyLimit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT limit_type, value FROM monthly_limits ORDER BY limit_type ASC")
            return [MonthlyLimit(limit_type=LimitType(r["limit_type"]), value=int(r["value"])) for r in fetchall(cur)]
