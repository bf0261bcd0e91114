from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for access control."""

    EMPLOYEE = "Employee"
    HOD = "HOD"


class RequestType(str, Enum):
    LEAVE = "leave"
    PERMISSION = "permission"
    SHIFT = "shift"
    SHIFT_SWAP = "shift_swap"


class RequestStatus(str, Enum):
    """Approval states of leave/permission/shift requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class SwapStatus(str, Enum):
    PENDING_TARGET_APPROVAL = "pending_target_approval"
    REJECTED_BY_TARGET = "rejected_by_target"
    PENDING_HOD_APPROVAL = "pending_hod_approval"
    REJECTED_BY_SYSTEM = "rejected_by_system"
    APPROVED = "approved"
    REJECTED_BY_HOD = "rejected_by_hod"

    @property
    def is_terminal(self) -> bool:
        return self not in {SwapStatus.PENDING_TARGET_APPROVAL, SwapStatus.PENDING_HOD_APPROVAL}


class ShiftType(str, Enum):
    MORNING = "Morning"
    EVENING = "Evening"
    NIGHT = "Night"


class LimitType(str, Enum):
    LEAVE = "leave"
    PERMISSION = "permission"
    SHIFT = "shift"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LEAVE = "Leave"
