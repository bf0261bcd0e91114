from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import AttendanceStatus


class AttendanceRepository(Protocol):
    def upsert(self, *, user_id: int, work_date: date, status: AttendanceStatus) -> int:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[dict]:
        """Rows for one day joined with username."""

        raise NotImplementedError
