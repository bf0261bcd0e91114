from __future__ import annotations

from datetime import date

import pytest

from leave_portal.core.enums import SwapStatus
from leave_portal.core.exceptions import ConflictError
from leave_portal.swaps import workflow
from leave_portal.swaps.model import ShiftSwap


def _swap(status=SwapStatus.PENDING_TARGET_APPROVAL):
    return ShiftSwap(
        swap_id=7,
        requester_id=2,
        target_id=3,
        swap_date=date(2026, 3, 10),
        requester_shift="Morning",
        target_shift="Night",
        reason="Appointment",
        status=status,
    )


def test_terminal_states_allow_no_transition():
    for status in SwapStatus:
        if status.is_terminal:
            assert all(not workflow.can_transition(status, new) for new in SwapStatus)


def test_cannot_skip_target_approval():
    assert not workflow.can_transition(SwapStatus.PENDING_TARGET_APPROVAL, SwapStatus.APPROVED)
    assert workflow.can_transition(SwapStatus.PENDING_HOD_APPROVAL, SwapStatus.APPROVED)


def test_creation_notifies_target_only():
    (note,) = workflow.creation_notifications(_swap(), requester_name="alice")
    assert note.user_id == 3
    assert note.message == (
        "alice wants to swap your Night shift on 2026-03-10 with their Morning shift. Please review the request."
    )


def test_target_rejection_notifies_requester():
    t = workflow.plan_target_response(_swap(), accept=False, target_name="bob")

    assert (t.expected, t.new) == (SwapStatus.PENDING_TARGET_APPROVAL, SwapStatus.REJECTED_BY_TARGET)
    assert [(n.user_id, n.message) for n in t.notifications] == [
        (2, "Your shift swap request for 2026-03-10 was declined by bob.")
    ]


def test_acceptance_with_failed_validation_is_rejected_by_system():
    t = workflow.plan_target_response(
        _swap(), accept=True, target_name="bob", validation_message="Limit reached."
    )

    assert t.new == SwapStatus.REJECTED_BY_SYSTEM
    assert [(n.user_id, n.message) for n in t.notifications] == [
        (2, "Your shift swap request for 2026-03-10 was rejected by system: Limit reached."),
        (3, "Shift swap request for 2026-03-10 was rejected by system: Limit reached."),
    ]


def test_acceptance_forwards_to_hod():
    t = workflow.plan_target_response(_swap(), accept=True, target_name="bob")

    assert t.new == SwapStatus.PENDING_HOD_APPROVAL
    assert [n.user_id for n in t.notifications] == [2]
    assert "pending HOD approval" in t.notifications[0].message


def test_rejection_ignores_validation_message():
    t = workflow.plan_target_response(_swap(), accept=False, target_name="bob", validation_message="boom")
    assert t.new == SwapStatus.REJECTED_BY_TARGET


@pytest.mark.parametrize("approve, expected", [(True, SwapStatus.APPROVED), (False, SwapStatus.REJECTED_BY_HOD)])
def test_hod_decision_notifies_both(approve, expected):
    t = workflow.plan_hod_decision(_swap(SwapStatus.PENDING_HOD_APPROVAL), approve=approve)

    assert t.new == expected
    assert [n.user_id for n in t.notifications] == [2, 3]


def test_hod_cannot_decide_before_target():
    with pytest.raises(ConflictError):
        workflow.plan_hod_decision(_swap(), approve=True)


def test_target_cannot_respond_twice():
    with pytest.raises(ConflictError):
        workflow.plan_target_response(_swap(SwapStatus.REJECTED_BY_TARGET), accept=True, target_name="bob")


def test_illegal_transition_cannot_be_built():
    with pytest.raises(ValueError):
        workflow.Transition(expected=SwapStatus.APPROVED, new=SwapStatus.REJECTED_BY_HOD)
