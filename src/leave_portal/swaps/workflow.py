"""Shift-swap state machine.

Pure functions only: they decide the next status and which notifications to
send, and leave every store write to the caller.

    pending_target_approval --target rejects--> rejected_by_target
    pending_target_approval --target accepts, validation fails--> rejected_by_system
    pending_target_approval --target accepts, validation passes--> pending_hod_approval
    pending_hod_approval --HOD rejects--> rejected_by_hod
    pending_hod_approval --HOD approves--> approved
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.enums import SwapStatus
from ..core.exceptions import ConflictError
from ..notifications.model import PendingNotification
from .model import ShiftSwap

ALLOWED_TRANSITIONS = {
    SwapStatus.PENDING_TARGET_APPROVAL: frozenset(
        {
            SwapStatus.REJECTED_BY_TARGET,
            SwapStatus.REJECTED_BY_SYSTEM,
            SwapStatus.PENDING_HOD_APPROVAL,
        }
    ),
    SwapStatus.PENDING_HOD_APPROVAL: frozenset({SwapStatus.APPROVED, SwapStatus.REJECTED_BY_HOD}),
}


@dataclass(frozen=True)
class Transition:
    expected: SwapStatus
    new: SwapStatus
    notifications: Tuple[PendingNotification, ...] = ()

    def __post_init__(self) -> None:
        if not can_transition(self.expected, self.new):
            raise ValueError(f"Illegal shift swap transition: {self.expected.value} -> {self.new.value}")


def can_transition(current: SwapStatus, new: SwapStatus) -> bool:
    return new in ALLOWED_TRANSITIONS.get(SwapStatus(current), frozenset())


def _require_status(swap: ShiftSwap, expected: SwapStatus) -> None:
    if swap.status != expected:
        raise ConflictError(f"Shift swap is already {swap.status.value.replace('_', ' ')}")


def creation_notifications(swap: ShiftSwap, *, requester_name: str) -> Tuple[PendingNotification, ...]:
    date_label = swap.swap_date.isoformat()
    return (
        PendingNotification(
            user_id=swap.target_id,
            message=(
                f"{requester_name} wants to swap your {swap.target_shift} shift on {date_label} "
                f"with their {swap.requester_shift} shift. Please review the request."
            ),
        ),
    )


def plan_target_response(
    swap: ShiftSwap,
    *,
    accept: bool,
    target_name: str,
    validation_message: Optional[str] = None,
) -> Transition:
    """Plan the target's answer.

    ``validation_message`` is the failure message from re-validating both
    employees; it is only consulted when the target accepts.
    """

    _require_status(swap, SwapStatus.PENDING_TARGET_APPROVAL)
    date_label = swap.swap_date.isoformat()

    if not accept:
        return Transition(
            expected=swap.status,
            new=SwapStatus.REJECTED_BY_TARGET,
            notifications=(
                PendingNotification(
                    user_id=swap.requester_id,
                    message=f"Your shift swap request for {date_label} was declined by {target_name}.",
                ),
            ),
        )

    if validation_message:
        return Transition(
            expected=swap.status,
            new=SwapStatus.REJECTED_BY_SYSTEM,
            notifications=(
                PendingNotification(
                    user_id=swap.requester_id,
                    message=(
                        f"Your shift swap request for {date_label} was rejected by system: {validation_message}"
                    ),
                ),
                PendingNotification(
                    user_id=swap.target_id,
                    message=f"Shift swap request for {date_label} was rejected by system: {validation_message}",
                ),
            ),
        )

    return Transition(
        expected=swap.status,
        new=SwapStatus.PENDING_HOD_APPROVAL,
        notifications=(
            PendingNotification(
                user_id=swap.requester_id,
                message=(
                    f"Your shift swap request for {date_label} was accepted by {target_name} "
                    "and is now pending HOD approval."
                ),
            ),
        ),
    )


def plan_hod_decision(swap: ShiftSwap, *, approve: bool) -> Transition:
    _require_status(swap, SwapStatus.PENDING_HOD_APPROVAL)
    date_label = swap.swap_date.isoformat()

    if approve:
        requester_msg = (
            f"Your shift swap request for {date_label} has been approved. "
            f"You are now on the {swap.target_shift} shift."
        )
        target_msg = (
            f"The shift swap for {date_label} has been approved. "
            f"You are now on the {swap.requester_shift} shift."
        )
    else:
        requester_msg = f"Your shift swap request for {date_label} has been rejected by the HOD."
        target_msg = f"The shift swap for {date_label} has been rejected by the HOD."

    return Transition(
        expected=swap.status,
        new=SwapStatus.APPROVED if approve else SwapStatus.REJECTED_BY_HOD,
        notifications=(
            PendingNotification(user_id=swap.requester_id, message=requester_msg),
            PendingNotification(user_id=swap.target_id, message=target_msg),
        ),
    )
