from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import as_date, as_datetime, now_local
from ..core.enums import SwapStatus
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone
from .model import ShiftSwap
from .repository import ShiftSwapRepository

_COLUMNS = """
    s.swap_id, s.requester_id, s.target_id, s.swap_date, s.requester_shift,
    s.target_shift, s.reason, s.status, s.created_at, s.updated_at
"""


def _to_swap(r: dict) -> ShiftSwap:
    return ShiftSwap(
        swap_id=int(r["swap_id"]),
        requester_id=int(r["requester_id"]),
        target_id=int(r["target_id"]),
        swap_date=as_date(r["swap_date"]),
        requester_shift=r["requester_shift"],
        target_shift=r["target_shift"],
        reason=r["reason"],
        status=SwapStatus(r["status"]),
        created_at=as_datetime(r.get("created_at")),
        updated_at=as_datetime(r.get("updated_at")),
    )


def _to_row(r: dict) -> dict:
    swap = _to_swap(r)
    return {
        "swap_id": swap.swap_id,
        "requester_id": swap.requester_id,
        "requester_name": r["requester_name"],
        "target_id": swap.target_id,
        "target_name": r["target_name"],
        "date": swap.swap_date.isoformat(),
        "requester_shift": swap.requester_shift,
        "target_shift": swap.target_shift,
        "reason": swap.reason,
        "status": swap.status.value,
        "created_at": swap.created_at.isoformat(sep=" ") if swap.created_at else None,
    }


class SQLShiftSwapRepository(ShiftSwapRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        requester_id: int,
        target_id: int,
        swap_date: date,
        requester_shift: str,
        target_shift: str,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shift_swaps(
                    requester_id, target_id, swap_date, requester_shift, target_shift, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(requester_id),
                    int(target_id),
                    swap_date.isoformat(),
                    requester_shift,
                    target_shift,
                    reason,
                    SwapStatus.PENDING_TARGET_APPROVAL.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, swap_id: int) -> Optional[ShiftSwap]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM shift_swaps s WHERE s.swap_id=%s", (int(swap_id),))
            r = fetchone(cur)
            return _to_swap(r) if r else None

    def update_status(self, *, swap_id: int, expected: SwapStatus, new: SwapStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE shift_swaps
                SET status=%s, updated_at=%s
                WHERE swap_id=%s AND status=%s
                """,
                (
                    SwapStatus(new).value,
                    now_local().isoformat(sep=" ", timespec="seconds"),
                    int(swap_id),
                    SwapStatus(expected).value,
                ),
            )
            return cur.rowcount > 0

    def _list(self, where: str, params: tuple, limit: int) -> Sequence[dict]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       ru.username AS requester_name,
                       tu.username AS target_name
                FROM shift_swaps s
                JOIN users ru ON ru.user_id = s.requester_id
                JOIN users tu ON tu.user_id = s.target_id
                WHERE {where}
                ORDER BY s.created_at DESC, s.swap_id DESC
                LIMIT %s
                """,
                params + (int(limit),),
            )
            return [_to_row(r) for r in fetchall(cur)]

    def list_incoming(self, *, target_id: int) -> Sequence[dict]:
        return self._list(
            "s.target_id=%s AND s.status=%s",
            (int(target_id), SwapStatus.PENDING_TARGET_APPROVAL.value),
            200,
        )

    def list_pending_hod(self) -> Sequence[dict]:
        return self._list("s.status=%s", (SwapStatus.PENDING_HOD_APPROVAL.value,), 200)

    def list_for_user(self, *, user_id: int, limit: int = 200) -> Sequence[dict]:
        return self._list("(s.requester_id=%s OR s.target_id=%s)", (int(user_id), int(user_id)), limit)
