from __future__ import annotations

from datetime import date, datetime, time

import pytest

from leave_portal.core.enums import RequestStatus, RequestType, Role
from leave_portal.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from leave_portal.notifications.service import NotificationService
from leave_portal.requests.model import EmployeeRequest
from leave_portal.requests.service import RequestService
from leave_portal.requests.validation import RequestValidator
from leave_portal.roster.model import DutyRosterEntry
from leave_portal.users.model import User


class FakeRequestsRepo:
    def __init__(self):
        self._next_id = 1
        self._items: dict[int, EmployeeRequest] = {}

    def create(self, *, user_id, request_type, work_date, reason, end_date=None, start_time=None,
               end_time=None, current_shift=None, requested_shift=None):
        rid = self._next_id
        self._next_id += 1
        self._items[rid] = EmployeeRequest(
            request_id=rid,
            user_id=int(user_id),
            request_type=RequestType(request_type),
            work_date=work_date,
            reason=reason,
            status=RequestStatus.PENDING,
            created_at=datetime(2026, 3, 1, 10, 0, 0),
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
            current_shift=current_shift,
            requested_shift=requested_shift,
        )
        return rid

    def get(self, *, request_id):
        return self._items.get(int(request_id))

    def count_active(self, *, user_id, request_type, start, end):
        return sum(
            1
            for r in self._items.values()
            if r.user_id == user_id
            and r.request_type == request_type
            and r.status in (RequestStatus.PENDING, RequestStatus.APPROVED)
            and start <= r.work_date <= end
        )

    def decide(self, *, request_id, status, decided_by):
        req = self._items.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        self._items[int(request_id)] = EmployeeRequest(
            request_id=req.request_id,
            user_id=req.user_id,
            request_type=req.request_type,
            work_date=req.work_date,
            reason=req.reason,
            status=status,
            created_at=req.created_at,
            end_date=req.end_date,
            decided_by=int(decided_by),
            decided_at=datetime(2026, 3, 1, 11, 0, 0),
        )
        return True

    def list_requests(self, *, statuses=None, user_id=None, limit=200):
        return [
            {"request_id": r.request_id, "status": r.status.value}
            for r in self._items.values()
            if (not statuses or r.status in statuses) and (user_id is None or r.user_id == user_id)
        ]

    def count_by_status(self, *, user_id):
        counts = {}
        for r in self._items.values():
            if r.user_id == user_id:
                counts[r.status.value] = counts.get(r.status.value, 0) + 1
        return counts


class FakeLimitsRepo:
    def __init__(self, values=None):
        self.values = values or {}

    def get(self, limit_type):
        return self.values.get(limit_type)


class FakeRosterRepo:
    def __init__(self):
        self.entries = {}

    def add(self, user_id, day, shift):
        self.entries[(user_id, day)] = DutyRosterEntry(roster_id=len(self.entries) + 1, user_id=user_id,
                                                       work_date=day, shift_type=shift)

    def get_for_user_and_date(self, *, user_id, work_date):
        return self.entries.get((user_id, work_date))


class FakeUsersRepo:
    def __init__(self):
        self.users = {
            1: User(user_id=1, username="hod", password_hash="x", role=Role.HOD),
            2: User(user_id=2, username="alice", password_hash="x", role=Role.EMPLOYEE),
        }

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def list_by_role(self, role):
        return [u for u in self.users.values() if u.role == role]


class FakeNotificationsRepo:
    def __init__(self):
        self.sent = []

    def insert(self, *, user_id, message):
        self.sent.append((user_id, message))
        return len(self.sent)


@pytest.fixture
def env():
    requests = FakeRequestsRepo()
    limits = FakeLimitsRepo()
    roster = FakeRosterRepo()
    users = FakeUsersRepo()
    notifications = FakeNotificationsRepo()
    svc = RequestService(
        requests,
        RequestValidator(requests, limits, roster),
        users,
        roster,
        NotificationService(notifications),
    )
    return svc, requests, limits, roster, notifications


def test_submit_leave_creates_pending_request_and_notifies_hod(env):
    svc, requests, _, _, notifications = env

    rid = svc.submit_leave(
        current_role=Role.EMPLOYEE,
        user_id=2,
        start_date=date(2026, 3, 10),
        end_date=date(2026, 3, 11),
        reason="Family trip",
    )

    req = requests.get(request_id=rid)
    assert req.status == RequestStatus.PENDING
    assert req.end_date == date(2026, 3, 11)
    assert notifications.sent == [(1, "New leave request from alice for 2026-03-10 to 2026-03-11.")]


def test_submit_leave_requires_reason(env):
    svc = env[0]
    with pytest.raises(ValidationError):
        svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                         end_date=None, reason="   ")


def test_submit_leave_rejects_end_before_start(env):
    svc = env[0]
    with pytest.raises(ValidationError, match="End date"):
        svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                         end_date=date(2026, 3, 9), reason="x")


def test_hod_cannot_submit_requests(env):
    svc = env[0]
    with pytest.raises(AuthorizationError):
        svc.submit_leave(current_role=Role.HOD, user_id=1, start_date=date(2026, 3, 10),
                         end_date=None, reason="x")


def test_leave_over_rostered_day_is_rejected(env):
    svc, requests, _, roster, notifications = env
    roster.add(2, date(2026, 3, 12), "Morning")

    with pytest.raises(ValidationError, match="duty scheduled on 2026-03-12"):
        svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                         end_date=date(2026, 3, 12), reason="x")

    assert requests._items == {}
    assert notifications.sent == []


def test_leave_blocked_once_monthly_limit_reached(env):
    svc, _, limits, _, _ = env
    limits.values[RequestType.LEAVE] = 1
    svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 2),
                     end_date=None, reason="first")

    with pytest.raises(ValidationError, match="monthly limit of 1 leave requests"):
        svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 20),
                         end_date=None, reason="second")

    # A new month starts a new count.
    svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 4, 1),
                     end_date=None, reason="third")


def test_submit_permission_validates_time_window(env):
    svc, requests, _, _, _ = env

    with pytest.raises(ValidationError, match="End time must be after start time"):
        svc.submit_permission(current_role=Role.EMPLOYEE, user_id=2, work_date=date(2026, 3, 10),
                              start_time="11:00", end_time="10:00", reason="Doctor")
    with pytest.raises(ValidationError):
        svc.submit_permission(current_role=Role.EMPLOYEE, user_id=2, work_date=date(2026, 3, 10),
                              start_time="9am", end_time="10:00", reason="Doctor")

    rid = svc.submit_permission(current_role=Role.EMPLOYEE, user_id=2, work_date=date(2026, 3, 10),
                                start_time="09:00", end_time="10:30", reason="Doctor")
    req = requests.get(request_id=rid)
    assert req.request_type == RequestType.PERMISSION
    assert (req.start_time, req.end_time) == (time(9, 0), time(10, 30))


def test_shift_change_uses_current_roster_shift(env):
    svc, requests, _, roster, _ = env
    roster.add(2, date(2026, 3, 10), "Morning")

    rid = svc.submit_shift_change(current_role=Role.EMPLOYEE, user_id=2, work_date=date(2026, 3, 10),
                                  requested_shift="night", reason="Exam in the morning")

    req = requests.get(request_id=rid)
    assert req.current_shift == "Morning"
    assert req.requested_shift == "Night"


def test_shift_change_requires_duty_and_a_different_shift(env):
    svc, _, _, roster, _ = env

    with pytest.raises(ValidationError, match="not assigned any shift"):
        svc.submit_shift_change(current_role=Role.EMPLOYEE, user_id=2, work_date=date(2026, 3, 10),
                                requested_shift="Night", reason="x")

    roster.add(2, date(2026, 3, 10), "Night")
    with pytest.raises(ValidationError, match="already on the Night shift"):
        svc.submit_shift_change(current_role=Role.EMPLOYEE, user_id=2, work_date=date(2026, 3, 10),
                                requested_shift="Night", reason="x")


def test_hod_approves_pending_request_and_requester_is_notified(env):
    svc, _, _, _, notifications = env
    rid = svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                           end_date=None, reason="x")
    notifications.sent.clear()

    req = svc.approve(current_role=Role.HOD, hod_user_id=1, request_id=rid)

    assert req.status == RequestStatus.APPROVED
    assert req.decided_by == 1
    assert notifications.sent == [(2, "Your leave request for 2026-03-10 has been approved.")]


def test_second_decision_conflicts_and_sends_nothing(env):
    svc, _, _, _, notifications = env
    rid = svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                           end_date=None, reason="x")
    svc.reject(current_role=Role.HOD, hod_user_id=1, request_id=rid)
    notifications.sent.clear()

    with pytest.raises(ConflictError):
        svc.approve(current_role=Role.HOD, hod_user_id=1, request_id=rid)
    assert notifications.sent == []


def test_decide_unknown_request(env):
    svc = env[0]
    with pytest.raises(NotFoundError):
        svc.approve(current_role=Role.HOD, hod_user_id=1, request_id=999)


def test_employee_cannot_decide(env):
    svc = env[0]
    with pytest.raises(AuthorizationError):
        svc.approve(current_role=Role.EMPLOYEE, hod_user_id=2, request_id=1)


def test_listing(env):
    svc = env[0]
    rid = svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                           end_date=None, reason="x")
    assert [r["request_id"] for r in svc.list_pending(current_role=Role.HOD)] == [rid]
    assert svc.list_history(current_role=Role.HOD) == []
    assert len(svc.list_my_requests(user_id=2)) == 1
    with pytest.raises(AuthorizationError):
        svc.list_pending(current_role=Role.EMPLOYEE)


def test_list_my_requests_filters_by_status(env):
    svc = env[0]
    first = svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 10),
                             end_date=None, reason="x")
    second = svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, 11),
                              end_date=None, reason="y")
    svc.approve(current_role=Role.HOD, hod_user_id=1, request_id=first)

    assert [r["request_id"] for r in svc.list_my_requests(user_id=2, status=RequestStatus.PENDING)] == [second]
    assert [r["request_id"] for r in svc.list_my_requests(user_id=2, status=RequestStatus.APPROVED)] == [first]
    assert svc.list_my_requests(user_id=2, status=RequestStatus.REJECTED) == []
    assert len(svc.list_my_requests(user_id=2)) == 2


def test_request_stats_counts_every_status(env):
    svc = env[0]
    assert svc.request_stats(user_id=2) == {"pending": 0, "approved": 0, "rejected": 0, "total": 0}

    for day in (10, 11, 12):
        svc.submit_leave(current_role=Role.EMPLOYEE, user_id=2, start_date=date(2026, 3, day),
                         end_date=None, reason="x")
    svc.approve(current_role=Role.HOD, hod_user_id=1, request_id=1)
    svc.reject(current_role=Role.HOD, hod_user_id=1, request_id=2)

    assert svc.request_stats(user_id=2) == {"pending": 1, "approved": 1, "rejected": 1, "total": 3}
