from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import month_bounds
from ..core.constants import GENERIC_VALIDATION_ERROR
from ..core.enums import LimitType, RequestType
from ..core.exceptions import StoreError
from ..limits.repository import LimitRepository
from ..roster.repository import RosterRepository
from .repository import RequestRepository

logger = logging.getLogger(__name__)

# Request types that must not collide with an existing duty assignment.
ROSTER_CHECKED_TYPES = frozenset({RequestType.LEAVE, RequestType.PERMISSION})

# Request types that also have their own monthly quota on top of the leave quota.
OWN_LIMIT_TYPES = {
    RequestType.PERMISSION: LimitType.PERMISSION,
    RequestType.SHIFT: LimitType.SHIFT,
}


@dataclass(frozen=True)
class ValidationResult:
    passed: bool
    message: str = ""


PASSED = ValidationResult(passed=True, message="Validation passed")


class RequestValidator:
    """Read-only checks run before a request may be created.

    Store failures never escape: they are logged and reported as a failed
    validation with a generic message.
    """

    def __init__(self, requests: RequestRepository, limits: LimitRepository, roster: RosterRepository):
        self._requests = requests
        self._limits = limits
        self._roster = roster

    def validate(self, user_id: int, request_date: date, request_type: RequestType = RequestType.LEAVE) -> ValidationResult:
        try:
            request_type = RequestType(request_type)

            result = self.check_monthly_limit(user_id, request_date, LimitType.LEAVE)
            if not result.passed:
                return result

            own_limit = OWN_LIMIT_TYPES.get(request_type)
            if own_limit is not None:
                result = self.check_monthly_limit(user_id, request_date, own_limit)
                if not result.passed:
                    return result

            # A swap's premise is an existing duty, so the roster check does not apply.
            if request_type in ROSTER_CHECKED_TYPES:
                result = self.check_roster_conflict(user_id, request_date)
                if not result.passed:
                    return result

            return PASSED
        except Exception:
            logger.exception("Validation error for user %s on %s (%s)", user_id, request_date, request_type)
            return ValidationResult(passed=False, message=GENERIC_VALIDATION_ERROR)

    def check_monthly_limit(self, user_id: int, request_date: date, limit_type: LimitType) -> ValidationResult:
        try:
            limit = self._limits.get(limit_type)
            if limit is None:
                return ValidationResult(passed=True)

            start, end = month_bounds(request_date)
            current = self._requests.count_active(
                user_id=int(user_id),
                request_type=RequestType(limit_type.value),
                start=start,
                end=end,
            )
        except StoreError:
            logger.exception("DB error while checking %s limit for user %s", limit_type.value, user_id)
            return ValidationResult(passed=False, message="Could not verify monthly limit.")

        if current >= limit:
            return ValidationResult(
                passed=False,
                message=f"You have reached your monthly limit of {limit} {limit_type.value} requests.",
            )
        return ValidationResult(passed=True)

    def check_roster_conflict(self, user_id: int, request_date: date) -> ValidationResult:
        try:
            entry = self._roster.get_for_user_and_date(user_id=int(user_id), work_date=request_date)
        except StoreError:
            logger.exception("DB error while checking roster for user %s on %s", user_id, request_date)
            return ValidationResult(passed=False, message="Could not verify duty roster.")

        if entry:
            return ValidationResult(
                passed=False,
                message=(
                    f"You have a duty scheduled on {request_date.isoformat()}. "
                    "Please request a shift adjustment instead."
                ),
            )
        return ValidationResult(passed=True)
