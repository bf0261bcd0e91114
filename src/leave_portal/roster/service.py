from __future__ import annotations

import logging
from datetime import date
from typing import Mapping, Optional

from ..core.constants import OFF_SHIFT
from ..core.enums import Role, ShiftType
from ..core.exceptions import AuthorizationError, ValidationError
from ..database.connection import DatabaseConnection
from ..users.repository import UserRepository
from .model import DutyRosterEntry
from .repository import RosterRepository

logger = logging.getLogger(__name__)


def normalize_shift(value: Optional[str]) -> Optional[ShiftType]:
    """Map a submitted shift label to a ShiftType; ``None`` means off duty."""
    v = str(value or "").strip()
    if not v or v.lower() == OFF_SHIFT.lower():
        return None
    for shift in ShiftType:
        if shift.value.lower() == v.lower():
            return shift
    raise ValidationError(f"Unknown shift type: {value}")


class RosterService:
    def __init__(self, roster: RosterRepository, users: UserRepository, conn: DatabaseConnection):
        self._roster = roster
        self._users = users
        self._conn = conn

    def get_entry(self, *, user_id: int, work_date: date) -> Optional[DutyRosterEntry]:
        return self._roster.get_for_user_and_date(user_id=int(user_id), work_date=work_date)

    def roster_for_date(self, *, work_date: date):
        return self._roster.list_for_date(work_date=work_date)

    def roster_for_user(self, *, user_id: int, start: date, end: date):
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return self._roster.list_for_user(user_id=int(user_id), start=start, end=end)

    def save_day(self, *, current_role: Role, work_date: date, assignments: Mapping[int, Optional[str]]) -> int:
        """Apply a day's roster in one transaction.

        ``Off`` or an empty value removes the user's entry for the day.
        Returns the number of users on duty after the save.
        """

        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can manage the duty roster")

        resolved = {int(user_id): normalize_shift(shift) for user_id, shift in assignments.items()}
        employees = {e.user_id for e in self._users.list_by_role(Role.EMPLOYEE)}
        unknown = set(resolved) - employees
        if unknown:
            raise ValidationError(f"Not an employee: {', '.join(str(u) for u in sorted(unknown))}")

        on_duty = 0
        with self._conn.transaction():
            for user_id, shift in resolved.items():
                if shift is None:
                    self._roster.delete_for_user_and_date(user_id=user_id, work_date=work_date)
                    continue
                self._roster.upsert(user_id=user_id, work_date=work_date, shift_type=shift.value)
                on_duty += 1

        logger.info("Roster for %s saved: %d on duty, %d off", work_date, on_duty, len(resolved) - on_duty)
        return on_duty
