from __future__ import annotations

from datetime import date, time
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import RequestStatus, RequestType
from .model import EmployeeRequest


class RequestRepository(Protocol):
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
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[EmployeeRequest]:
        raise NotImplementedError

    def count_active(self, *, user_id: int, request_type: RequestType, start: date, end: date) -> int:
        """Count pending + approved requests of one type with work_date in [start, end]."""

        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, decided_by: int) -> bool:
        """Move a pending request to ``status``; False when it is no longer pending."""

        raise NotImplementedError

    def count_by_status(self, *, user_id: int) -> dict[str, int]:
        """Number of the user's requests per status value."""

        raise NotImplementedError

    def list_requests(
        self,
        *,
        statuses: Optional[Iterable[RequestStatus]] = None,
        user_id: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[dict]:
        """Return UI rows (joined with user)."""

        raise NotImplementedError
