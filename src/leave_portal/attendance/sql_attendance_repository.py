from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone
from .repository import AttendanceRepository


class SQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT attendance_id FROM attendance WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date.isoformat()),
            )
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    "UPDATE attendance SET status=%s WHERE attendance_id=%s",
                    (status.value, int(existing["attendance_id"])),
                )
                return int(existing["attendance_id"])

            cur.execute(
                "INSERT INTO attendance(user_id, work_date, status) VALUES(%s,%s,%s)",
                (int(user_id), work_date.isoformat(), status.value),
            )
            return int(cur.lastrowid)

    def list_for_date(self, work_date: date) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT a.attendance_id, a.user_id, u.username, a.status
                FROM attendance a
                JOIN users u ON u.user_id = a.user_id
                WHERE a.work_date=%s
                ORDER BY u.username ASC
                """,
                (work_date.isoformat(),),
            )
            return [
                {
                    "attendance_id": int(r["attendance_id"]),
                    "user_id": int(r["user_id"]),
                    "username": r["username"],
                    "work_date": work_date.isoformat(),
                    "status": r["status"],
                }
                for r in fetchall(cur)
            ]
