from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional

from ..common.validators import require_non_empty, require_time
from ..core.constants import DEFAULT_LIST_LIMIT, MAX_LEAVE_DAYS
from ..core.enums import RequestStatus, RequestType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..notifications.model import PendingNotification
from ..notifications.service import NotificationService
from ..roster.repository import RosterRepository
from ..roster.service import normalize_shift
from ..users.repository import UserRepository
from .model import EmployeeRequest
from .repository import RequestRepository
from .validation import RequestValidator, ValidationResult

logger = logging.getLogger(__name__)


class RequestService:
    def __init__(
        self,
        requests: RequestRepository,
        validator: RequestValidator,
        users: UserRepository,
        roster: RosterRepository,
        notifications: NotificationService,
    ):
        self._requests = requests
        self._validator = validator
        self._users = users
        self._roster = roster
        self._notifications = notifications

    @staticmethod
    def _require_employee(current_role: Role) -> None:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can submit requests")

    def _require_valid(self, user_id: int, work_date: date, request_type: RequestType) -> None:
        result = self._validator.validate(int(user_id), work_date, request_type)
        if not result.passed:
            raise ValidationError(result.message)

    def _notify_hods(self, user_id: int, request_type: RequestType, date_label: str) -> None:
        requester = self._users.get_by_id(int(user_id))
        name = requester.username if requester else f"user {user_id}"
        self._notifications.deliver(
            PendingNotification(
                user_id=hod.user_id,
                message=f"New {request_type.value} request from {name} for {date_label}.",
            )
            for hod in self._users.list_by_role(Role.HOD)
        )

    def validate(self, *, user_id: int, work_date: date, request_type: RequestType) -> ValidationResult:
        return self._validator.validate(int(user_id), work_date, request_type)

    def submit_leave(
        self,
        *,
        current_role: Role,
        user_id: int,
        start_date: date,
        end_date: Optional[date],
        reason: str,
    ) -> int:
        self._require_employee(current_role)
        reason = require_non_empty(reason, "Reason")

        end_date = end_date or start_date
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        if (end_date - start_date).days + 1 > MAX_LEAVE_DAYS:
            raise ValidationError(f"A single leave request cannot exceed {MAX_LEAVE_DAYS} days")

        self._require_valid(user_id, start_date, RequestType.LEAVE)
        day = start_date + timedelta(days=1)
        while day <= end_date:
            result = self._validator.check_roster_conflict(int(user_id), day)
            if not result.passed:
                raise ValidationError(result.message)
            day += timedelta(days=1)

        request_id = self._requests.create(
            user_id=int(user_id),
            request_type=RequestType.LEAVE,
            work_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("Leave request %s created for user %s (%s..%s)", request_id, user_id, start_date, end_date)

        label = start_date.isoformat() if end_date == start_date else f"{start_date.isoformat()} to {end_date.isoformat()}"
        self._notify_hods(user_id, RequestType.LEAVE, label)
        return request_id

    def submit_permission(
        self,
        *,
        current_role: Role,
        user_id: int,
        work_date: date,
        start_time: str,
        end_time: str,
        reason: str,
    ) -> int:
        self._require_employee(current_role)
        reason = require_non_empty(reason, "Reason")
        start_t = require_time(start_time, "Start time")
        end_t = require_time(end_time, "End time")
        if end_t <= start_t:
            raise ValidationError("End time must be after start time")

        self._require_valid(user_id, work_date, RequestType.PERMISSION)

        request_id = self._requests.create(
            user_id=int(user_id),
            request_type=RequestType.PERMISSION,
            work_date=work_date,
            start_time=start_t,
            end_time=end_t,
            reason=reason,
        )
        logger.info("Permission request %s created for user %s on %s", request_id, user_id, work_date)
        self._notify_hods(user_id, RequestType.PERMISSION, work_date.isoformat())
        return request_id

    def submit_shift_change(
        self,
        *,
        current_role: Role,
        user_id: int,
        work_date: date,
        requested_shift: str,
        reason: str,
    ) -> int:
        self._require_employee(current_role)
        reason = require_non_empty(reason, "Reason")
        wanted = normalize_shift(requested_shift)
        if wanted is None:
            raise ValidationError("Requested shift is required")

        entry = self._roster.get_for_user_and_date(user_id=int(user_id), work_date=work_date)
        if not entry:
            raise ValidationError(f"You are not assigned any shift on {work_date.isoformat()}")
        if entry.shift_type == wanted.value:
            raise ValidationError(f"You are already on the {wanted.value} shift on {work_date.isoformat()}")

        self._require_valid(user_id, work_date, RequestType.SHIFT)

        request_id = self._requests.create(
            user_id=int(user_id),
            request_type=RequestType.SHIFT,
            work_date=work_date,
            current_shift=entry.shift_type,
            requested_shift=wanted.value,
            reason=reason,
        )
        logger.info("Shift change request %s created for user %s on %s", request_id, user_id, work_date)
        self._notify_hods(user_id, RequestType.SHIFT, work_date.isoformat())
        return request_id

    def get(self, *, request_id: int) -> EmployeeRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        return req

    def decide(self, *, current_role: Role, hod_user_id: int, request_id: int, approve: bool) -> EmployeeRequest:
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can approve or reject requests")

        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED
        if not self._requests.decide(request_id=int(request_id), status=status, decided_by=int(hod_user_id)):
            existing = self._requests.get(request_id=int(request_id))
            if not existing:
                raise NotFoundError("Request not found")
            raise ConflictError(f"Request has already been {existing.status.value}")

        req = self.get(request_id=request_id)
        logger.info("Request %s %s by HOD %s", req.request_id, status.value, hod_user_id)

        self._notifications.deliver(
            [
                PendingNotification(
                    user_id=req.user_id,
                    message=f"Your {req.request_type.value} request for {req.date_label} has been {status.value}.",
                )
            ]
        )
        return req

    def approve(self, *, current_role: Role, hod_user_id: int, request_id: int) -> EmployeeRequest:
        return self.decide(current_role=current_role, hod_user_id=hod_user_id, request_id=request_id, approve=True)

    def reject(self, *, current_role: Role, hod_user_id: int, request_id: int) -> EmployeeRequest:
        return self.decide(current_role=current_role, hod_user_id=hod_user_id, request_id=request_id, approve=False)

    def list_my_requests(self, *, user_id: int, status: Optional[RequestStatus] = None):
        statuses = [RequestStatus(status)] if status else None
        return self._requests.list_requests(user_id=int(user_id), statuses=statuses, limit=DEFAULT_LIST_LIMIT)

    def request_stats(self, *, user_id: int) -> dict[str, int]:
        counts = self._requests.count_by_status(user_id=int(user_id))
        stats = {s.value: int(counts.get(s.value, 0)) for s in RequestStatus}
        stats["total"] = sum(stats.values())
        return stats

    def list_pending(self, *, current_role: Role):
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can review requests")
        return self._requests.list_requests(statuses=[RequestStatus.PENDING], limit=DEFAULT_LIST_LIMIT)

    def list_history(self, *, current_role: Role):
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can review requests")
        return self._requests.list_requests(
            statuses=[RequestStatus.APPROVED, RequestStatus.REJECTED],
            limit=DEFAULT_LIST_LIMIT,
        )
