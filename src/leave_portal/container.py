from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.service import AttendanceService
from .attendance.sql_attendance_repository import SQLAttendanceRepository
from .database.connection import DatabaseConnection, build_connection
from .limits.service import LimitService
from .limits.sql_limit_repository import SQLLimitRepository
from .notifications.service import NotificationService
from .notifications.sql_notification_repository import SQLNotificationRepository
from .requests.service import RequestService
from .requests.sql_request_repository import SQLRequestRepository
from .requests.validation import RequestValidator
from .roster.service import RosterService
from .roster.sql_roster_repository import SQLRosterRepository
from .swaps.service import ShiftSwapService
from .swaps.sql_swap_repository import SQLShiftSwapRepository
from .users.service import AuthService, UserService
from .users.sql_user_repository import SQLUserRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: SQLUserRepository
    requests_repo: SQLRequestRepository
    swaps_repo: SQLShiftSwapRepository
    roster_repo: SQLRosterRepository
    limits_repo: SQLLimitRepository
    attendance_repo: SQLAttendanceRepository
    notifications_repo: SQLNotificationRepository

    auth_service: AuthService
    user_service: UserService
    notification_service: NotificationService
    validator: RequestValidator
    request_service: RequestService
    swap_service: ShiftSwapService
    roster_service: RosterService
    limit_service: LimitService
    attendance_service: AttendanceService

    def close(self) -> None:
        self.conn.close()


def build_container(settings: Any = None, *, conn: Optional[DatabaseConnection] = None) -> Container:
    """Wire repositories and services around one store connection factory.

    Pass ``conn`` to reuse an existing factory (tests); otherwise it is built
    from ``settings.DB_BACKEND``.
    """

    if conn is None:
        conn = build_connection(settings)

    users_repo = SQLUserRepository(conn)
    requests_repo = SQLRequestRepository(conn)
    swaps_repo = SQLShiftSwapRepository(conn)
    roster_repo = SQLRosterRepository(conn)
    limits_repo = SQLLimitRepository(conn)
    attendance_repo = SQLAttendanceRepository(conn)
    notifications_repo = SQLNotificationRepository(conn)

    notification_service = NotificationService(notifications_repo)
    validator = RequestValidator(requests_repo, limits_repo, roster_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        requests_repo=requests_repo,
        swaps_repo=swaps_repo,
        roster_repo=roster_repo,
        limits_repo=limits_repo,
        attendance_repo=attendance_repo,
        notifications_repo=notifications_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        notification_service=notification_service,
        validator=validator,
        request_service=RequestService(requests_repo, validator, users_repo, roster_repo, notification_service),
        swap_service=ShiftSwapService(swaps_repo, users_repo, roster_repo, validator, notification_service, conn),
        roster_service=RosterService(roster_repo, users_repo, conn),
        limit_service=LimitService(limits_repo, conn),
        attendance_service=AttendanceService(attendance_repo, users_repo, conn),
    )
