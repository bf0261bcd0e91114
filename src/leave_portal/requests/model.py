from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import RequestStatus, RequestType


@dataclass(frozen=True)
class EmployeeRequest:
    """A leave, permission or shift-change request, tagged by ``request_type``.

    Type-specific fields:
    - leave: ``end_date``
    - permission: ``start_time``, ``end_time``
    - shift: ``current_shift``, ``requested_shift``
    """

    request_id: int
    user_id: int
    request_type: RequestType
    work_date: date
    reason: str
    status: RequestStatus
    created_at: Optional[datetime] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    current_shift: Optional[str] = None
    requested_shift: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None

    @property
    def date_label(self) -> str:
        if self.end_date and self.end_date != self.work_date:
            return f"{self.work_date.isoformat()} to {self.end_date.isoformat()}"
        return self.work_date.isoformat()
