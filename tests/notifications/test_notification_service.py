from __future__ import annotations

from datetime import date

import pytest

from leave_portal.core.enums import Role, SwapStatus
from leave_portal.core.exceptions import NotFoundError, StoreError
from leave_portal.notifications.model import PendingNotification
from leave_portal.notifications.service import NotificationService


class FlakyNotificationsRepo:
    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.sent = []

    def insert(self, *, user_id, message):
        if user_id in self.fail_for:
            raise StoreError("insert failed")
        self.sent.append((user_id, message))
        return len(self.sent)


def test_deliver_skips_failures_and_counts_successes():
    repo = FlakyNotificationsRepo(fail_for={2})
    svc = NotificationService(repo)

    delivered = svc.deliver(
        [PendingNotification(user_id=2, message="a"), PendingNotification(user_id=3, message="b")]
    )

    assert delivered == 1
    assert repo.sent == [(3, "b")]


def test_read_flags(container, staff):
    svc = container.notification_service
    first = container.notifications_repo.insert(user_id=staff["alice"], message="one")
    container.notifications_repo.insert(user_id=staff["alice"], message="two")

    assert svc.unread_count(user_id=staff["alice"]) == 2
    assert [n.message for n in svc.list_for(user_id=staff["alice"])] == ["two", "one"]

    svc.mark_read(user_id=staff["alice"], notification_id=first)
    assert svc.unread_count(user_id=staff["alice"]) == 1
    with pytest.raises(NotFoundError):
        svc.mark_read(user_id=staff["alice"], notification_id=first)
    with pytest.raises(NotFoundError):
        svc.mark_read(user_id=staff["bob"], notification_id=first)

    assert svc.mark_all_read(user_id=staff["alice"]) == 1
    assert svc.unread_count(user_id=staff["alice"]) == 0


def test_delivery_failure_does_not_undo_swap_transition(container, staff, monkeypatch):
    swap_id = container.swap_service.request_swap(
        current_role=Role.EMPLOYEE,
        requester_id=staff["alice"],
        target_id=staff["bob"],
        swap_date=staff["day"],
        reason="x",
    )

    def broken_insert(**kwargs):
        raise StoreError("notifications table locked")

    monkeypatch.setattr(container.notifications_repo, "insert", broken_insert)

    status = container.swap_service.respond(user_id=staff["bob"], swap_id=swap_id, accept=False)

    assert status == SwapStatus.REJECTED_BY_TARGET
    assert container.swap_service.get(swap_id=swap_id).status == SwapStatus.REJECTED_BY_TARGET


def test_new_request_notifies_every_hod(container, staff, add_user):
    second_hod = add_user("hod2", Role.HOD)

    container.request_service.submit_leave(
        current_role=Role.EMPLOYEE,
        user_id=staff["alice"],
        start_date=date(2026, 3, 20),
        end_date=None,
        reason="Wedding",
    )

    for hod in (staff["hod"], second_hod):
        assert [n.message for n in container.notification_service.list_for(user_id=hod)] == [
            "New leave request from alice for 2026-03-20."
        ]
