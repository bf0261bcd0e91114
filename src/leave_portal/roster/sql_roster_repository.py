from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import as_date
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone
from .model import DutyRosterEntry
from .repository import RosterRepository


def _to_entry(r: dict) -> DutyRosterEntry:
    return DutyRosterEntry(
        roster_id=int(r["roster_id"]),
        user_id=int(r["user_id"]),
        work_date=as_date(r["work_date"]),
        shift_type=r["shift_type"],
    )


class SQLRosterRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, *, user_id: int, work_date: date) -> Optional[DutyRosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT roster_id, user_id, work_date, shift_type
                FROM duty_roster
                WHERE user_id=%s AND work_date=%s
                """,
                (int(user_id), work_date.isoformat()),
            )
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def upsert(self, *, user_id: int, work_date: date, shift_type: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT roster_id FROM duty_roster WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date.isoformat()),
            )
            existing = fetchone(cur)
            if existing:
                cur.execute(
                    "UPDATE duty_roster SET shift_type=%s WHERE roster_id=%s",
                    (shift_type, int(existing["roster_id"])),
                )
                return int(existing["roster_id"])

            cur.execute(
                "INSERT INTO duty_roster(user_id, work_date, shift_type) VALUES(%s,%s,%s)",
                (int(user_id), work_date.isoformat(), shift_type),
            )
            return int(cur.lastrowid)

    def delete_for_user_and_date(self, *, user_id: int, work_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM duty_roster WHERE user_id=%s AND work_date=%s",
                (int(user_id), work_date.isoformat()),
            )
            return cur.rowcount > 0

    def list_for_date(self, *, work_date: date) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT dr.roster_id, dr.user_id, u.username, dr.work_date, dr.shift_type
                FROM duty_roster dr
                JOIN users u ON u.user_id = dr.user_id
                WHERE dr.work_date=%s
                ORDER BY u.username ASC
                """,
                (work_date.isoformat(),),
            )
            return [
                {
                    "roster_id": int(r["roster_id"]),
                    "user_id": int(r["user_id"]),
                    "username": r["username"],
                    "work_date": as_date(r["work_date"]).isoformat(),
                    "shift_type": r["shift_type"],
                }
                for r in fetchall(cur)
            ]

    def list_for_user(self, *, user_id: int, start: date, end: date) -> Sequence[DutyRosterEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT roster_id, user_id, work_date, shift_type
                FROM duty_roster
                WHERE user_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date ASC
                """,
                (int(user_id), start.isoformat(), end.isoformat()),
            )
            return [_to_entry(r) for r in fetchall(cur)]
