from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import RequestType, Role, SwapStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..database.connection import DatabaseConnection
from ..notifications.service import NotificationService
from ..requests.validation import RequestValidator
from ..roster.repository import RosterRepository
from ..users.repository import UserRepository
from . import workflow
from .model import ShiftSwap
from .repository import ShiftSwapRepository

logger = logging.getLogger(__name__)


class ShiftSwapService:
    """Use case: the requester -> target -> HOD approval chain for shift swaps.

    Status writes are guarded by the expected current status; notifications
    planned by the workflow are delivered only after the write has committed.
    """

    def __init__(
        self,
        swaps: ShiftSwapRepository,
        users: UserRepository,
        roster: RosterRepository,
        validator: RequestValidator,
        notifications: NotificationService,
        conn: DatabaseConnection,
    ):
        self._swaps = swaps
        self._users = users
        self._roster = roster
        self._validator = validator
        self._notifications = notifications
        self._conn = conn

    def get(self, *, swap_id: int) -> ShiftSwap:
        swap = self._swaps.get(swap_id=int(swap_id))
        if not swap:
            raise NotFoundError("Shift swap not found")
        return swap

    def _username(self, user_id: int) -> str:
        user = self._users.get_by_id(int(user_id))
        return user.username if user else f"user {user_id}"

    def _apply(self, swap: ShiftSwap, transition: workflow.Transition) -> None:
        if not self._swaps.update_status(swap_id=swap.swap_id, expected=transition.expected, new=transition.new):
            current = self.get(swap_id=swap.swap_id)
            raise ConflictError(f"Shift swap is already {current.status.value.replace('_', ' ')}")

    def request_swap(
        self,
        *,
        current_role: Role,
        requester_id: int,
        target_id: int,
        swap_date: date,
        reason: str,
    ) -> int:
        if current_role != Role.EMPLOYEE:
            raise AuthorizationError("Only employees can request shift swaps")
        reason = require_non_empty(reason, "Reason")

        if target_id is None:
            raise ValidationError("Please select an employee to swap with")
        requester_id, target_id = int(requester_id), int(target_id)
        if requester_id == target_id:
            raise ValidationError("You cannot swap a shift with yourself")

        requester = self._users.get_by_id(requester_id)
        target = self._users.get_by_id(target_id)
        if not requester or not target:
            raise NotFoundError("User not available")
        if target.role != Role.EMPLOYEE:
            raise ValidationError("Shifts can only be swapped with another employee")

        mine = self._roster.get_for_user_and_date(user_id=requester_id, work_date=swap_date)
        if not mine:
            raise ValidationError("You are not assigned any shift on this date")
        theirs = self._roster.get_for_user_and_date(user_id=target_id, work_date=swap_date)
        if not theirs:
            raise ValidationError(
                "The selected employee is not assigned any shift on this date. "
                "Please select a different employee or date."
            )

        swap_id = self._swaps.create(
            requester_id=requester_id,
            target_id=target_id,
            swap_date=swap_date,
            requester_shift=mine.shift_type,
            target_shift=theirs.shift_type,
            reason=reason,
        )
        logger.info("Shift swap %s requested by %s with %s on %s", swap_id, requester_id, target_id, swap_date)

        self._notifications.deliver(
            workflow.creation_notifications(self.get(swap_id=swap_id), requester_name=requester.username)
        )
        return swap_id

    def _revalidate(self, swap: ShiftSwap) -> Optional[str]:
        for user_id in (swap.requester_id, swap.target_id):
            result = self._validator.validate(user_id, swap.swap_date, RequestType.SHIFT_SWAP)
            if not result.passed:
                return result.message
        return None

    def respond(self, *, user_id: int, swap_id: int, accept: bool) -> SwapStatus:
        """Target employee accepts or rejects. Returns the new status."""

        swap = self.get(swap_id=swap_id)
        if swap.target_id != int(user_id):
            raise AuthorizationError("Only the requested employee can respond to this swap")
        if swap.status != SwapStatus.PENDING_TARGET_APPROVAL:
            raise ConflictError(f"Shift swap is already {swap.status.value.replace('_', ' ')}")

        validation_message = self._revalidate(swap) if accept else None
        transition = workflow.plan_target_response(
            swap,
            accept=accept,
            target_name=self._username(swap.target_id),
            validation_message=validation_message,
        )
        self._apply(swap, transition)
        logger.info("Shift swap %s moved to %s by target %s", swap.swap_id, transition.new.value, user_id)

        self._notifications.deliver(transition.notifications)
        return transition.new

    def hod_decide(self, *, current_role: Role, hod_user_id: int, swap_id: int, approve: bool) -> SwapStatus:
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can approve or reject shift swaps")

        swap = self.get(swap_id=swap_id)
        if swap.status != SwapStatus.PENDING_HOD_APPROVAL:
            raise ConflictError(f"Shift swap is already {swap.status.value.replace('_', ' ')}")
        transition = workflow.plan_hod_decision(swap, approve=approve)

        with self._conn.transaction():
            if approve:
                for user_id, shift in ((swap.requester_id, swap.requester_shift), (swap.target_id, swap.target_shift)):
                    entry = self._roster.get_for_user_and_date(user_id=user_id, work_date=swap.swap_date)
                    if not entry:
                        raise ValidationError(
                            f"{self._username(user_id)} is no longer on the roster for {swap.swap_date.isoformat()}"
                        )
                    # The roster changed after the swap was requested.
                    if entry.shift_type != shift:
                        raise ConflictError(
                            f"{self._username(user_id)} is now on the {entry.shift_type} shift on "
                            f"{swap.swap_date.isoformat()}, not {shift}. Reject this swap and request a new one."
                        )
            self._apply(swap, transition)
            if approve:
                self._roster.upsert(
                    user_id=swap.requester_id, work_date=swap.swap_date, shift_type=swap.target_shift
                )
                self._roster.upsert(
                    user_id=swap.target_id, work_date=swap.swap_date, shift_type=swap.requester_shift
                )

        logger.info("Shift swap %s %s by HOD %s", swap.swap_id, transition.new.value, hod_user_id)
        self._notifications.deliver(transition.notifications)
        return transition.new

    def list_for_user(self, *, user_id: int):
        return self._swaps.list_for_user(user_id=int(user_id), limit=DEFAULT_LIST_LIMIT)

    def list_incoming(self, *, user_id: int):
        return self._swaps.list_incoming(target_id=int(user_id))

    def list_pending_hod(self, *, current_role: Role):
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can review shift swaps")
        return self._swaps.list_pending_hod()
