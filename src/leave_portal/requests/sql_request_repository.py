from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import as_date, as_datetime, as_time, format_hhmm, now_local
from ..core.enums import RequestStatus, RequestType
from ..database.connection import DatabaseConnection
from ..database.sql_base import db_cursor, fetchall, fetchone
from .model import EmployeeRequest
from .repository import RequestRepository

_COLUMNS = """
    r.request_id, r.user_id, r.request_type, r.work_date, r.end_date,
    r.start_time, r.end_time, r.current_shift, r.requested_shift,
    r.reason, r.status, r.created_at, r.decided_by, r.decided_at
"""


def _to_request(r: dict) -> EmployeeRequest:
    return EmployeeRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        request_type=RequestType(r["request_type"]),
        work_date=as_date(r["work_date"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        created_at=as_datetime(r.get("created_at")),
        end_date=as_date(r.get("end_date")),
        start_time=as_time(r.get("start_time")),
        end_time=as_time(r.get("end_time")),
        current_shift=r.get("current_shift"),
        requested_shift=r.get("requested_shift"),
        decided_by=r.get("decided_by"),
        decided_at=as_datetime(r.get("decided_at")),
    )


class SQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        request_type: RequestType,
        work_date: date,
        reason: str,
        end_date: Optional[date] = None,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        current_shift: Optional[str] = None,
        requested_shift: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO requests(
                    user_id, request_type, work_date, end_date, start_time, end_time,
                    current_shift, requested_shift, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    RequestType(request_type).value,
                    work_date.isoformat(),
                    end_date.isoformat() if end_date else None,
                    format_hhmm(start_time),
                    format_hhmm(end_time),
                    current_shift,
                    requested_shift,
                    reason,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, *, request_id: int) -> Optional[EmployeeRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM requests r WHERE r.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def count_active(self, *, user_id: int, request_type: RequestType, start: date, end: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM requests
                WHERE user_id=%s
                  AND request_type=%s
                  AND status IN (%s, %s)
                  AND work_date BETWEEN %s AND %s
                """,
                (
                    int(user_id),
                    RequestType(request_type).value,
                    RequestStatus.PENDING.value,
                    RequestStatus.APPROVED.value,
                    start.isoformat(),
                    end.isoformat(),
                ),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def decide(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE requests
                SET status=%s, decided_by=%s, decided_at=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(decided_by),
                    now_local().isoformat(sep=" ", timespec="seconds"),
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def count_by_status(self, *, user_id: int) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT status, COUNT(*) AS n FROM requests WHERE user_id=%s GROUP BY status",
                (int(user_id),),
            )
            return {r["status"]: int(r["n"]) for r in fetchall(cur)}

    def list_requests(
        self,
        *,
        statuses: Optional[Iterable[RequestStatus]] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        clauses: list[str] = []
        params: list[object] = []
        if statuses:
            values = [RequestStatus(s).value for s in statuses]
            clauses.append(f"r.status IN ({', '.join(['%s'] * len(values))})")
            params.extend(values)
        if user_id is not None:
            clauses.append("r.user_id=%s")
            params.append(int(user_id))

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, u.username
                FROM requests r
                JOIN users u ON u.user_id = r.user_id
                {where}
                ORDER BY r.created_at DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            out: list[dict] = []
            for r in fetchall(cur):
                req = _to_request(r)
                out.append(
                    {
                        "request_id": req.request_id,
                        "user_id": req.user_id,
                        "username": r["username"],
                        "request_type": req.request_type.value,
                        "date": req.date_label,
                        "work_date": req.work_date.isoformat(),
                        "end_date": req.end_date.isoformat() if req.end_date else None,
                        "start_time": format_hhmm(req.start_time),
                        "end_time": format_hhmm(req.end_time),
                        "current_shift": req.current_shift,
                        "requested_shift": req.requested_shift,
                        "reason": req.reason,
                        "status": req.status.value,
                        "created_at": req.created_at.isoformat(sep=" ") if req.created_at else None,
                    }
                )
            return out
