from __future__ import annotations

import logging
from datetime import date
from typing import Mapping

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..database.connection import DatabaseConnection
from ..users.repository import UserRepository
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository, conn: DatabaseConnection):
        self._attendance = attendance
        self._users = users
        self._conn = conn

    def for_date(self, *, work_date: date):
        return self._attendance.list_for_date(work_date)

    def mark_day(self, *, current_role: Role, work_date: date, statuses: Mapping[int, str]) -> dict[int, AttendanceStatus]:
        """Record attendance for every employee; unlisted employees are marked Absent."""

        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can mark attendance")

        parsed: dict[int, AttendanceStatus] = {}
        for user_id, raw in statuses.items():
            try:
                parsed[int(user_id)] = AttendanceStatus(str(raw).strip().capitalize())
            except ValueError:
                raise ValidationError(f"Invalid attendance status: {raw}")

        employees = self._users.list_by_role(Role.EMPLOYEE)
        unknown = set(parsed) - {e.user_id for e in employees}
        if unknown:
            raise ValidationError(f"Not an employee: {', '.join(str(u) for u in sorted(unknown))}")

        result: dict[int, AttendanceStatus] = {}
        with self._conn.transaction():
            for employee in employees:
                status = parsed.get(employee.user_id, AttendanceStatus.ABSENT)
                self._attendance.upsert(user_id=employee.user_id, work_date=work_date, status=status)
                result[employee.user_id] = status

        logger.info("Attendance for %s saved for %d employees", work_date, len(result))
        return result
