from __future__ import annotations

from datetime import date

from leave_portal.core.constants import GENERIC_VALIDATION_ERROR
from leave_portal.core.enums import LimitType, RequestType
from leave_portal.core.exceptions import StoreError
from leave_portal.requests.validation import RequestValidator
from leave_portal.roster.model import DutyRosterEntry


class FakeRequestsRepo:
    def __init__(self, counts=None):
        # (user_id, request_type) -> active count
        self.counts = counts or {}
        self.calls = []

    def count_active(self, *, user_id, request_type, start, end):
        self.calls.append((user_id, request_type, start, end))
        return self.counts.get((user_id, request_type), 0)


class FakeLimitsRepo:
    def __init__(self, values=None):
        self.values = values or {}

    def get(self, limit_type):
        return self.values.get(LimitType(limit_type))


class FakeRosterRepo:
    def __init__(self, entries=()):
        self.entries = {(e.user_id, e.work_date): e for e in entries}

    def get_for_user_and_date(self, *, user_id, work_date):
        return self.entries.get((user_id, work_date))


class BrokenRepo:
    def count_active(self, **kwargs):
        raise StoreError("db down")

    def get(self, limit_type):
        raise StoreError("db down")

    def get_for_user_and_date(self, **kwargs):
        raise StoreError("db down")


def _entry(user_id, day, shift="Morning"):
    return DutyRosterEntry(roster_id=1, user_id=user_id, work_date=day, shift_type=shift)


def test_passes_without_limits_or_duty():
    v = RequestValidator(FakeRequestsRepo(), FakeLimitsRepo(), FakeRosterRepo())
    result = v.validate(1, date(2026, 3, 10), RequestType.LEAVE)
    assert result.passed is True


def test_leave_limit_reached_fails_with_limit_in_message():
    requests = FakeRequestsRepo({(1, RequestType.LEAVE): 2})
    v = RequestValidator(requests, FakeLimitsRepo({LimitType.LEAVE: 2}), FakeRosterRepo())

    result = v.validate(1, date(2026, 3, 10), RequestType.LEAVE)

    assert result.passed is False
    assert result.message == "You have reached your monthly limit of 2 leave requests."


def test_leave_limit_counts_the_calendar_month_of_the_date():
    requests = FakeRequestsRepo()
    v = RequestValidator(requests, FakeLimitsRepo({LimitType.LEAVE: 5}), FakeRosterRepo())

    v.validate(1, date(2026, 2, 14), RequestType.LEAVE)

    assert requests.calls == [(1, RequestType.LEAVE, date(2026, 2, 1), date(2026, 2, 28))]


def test_below_limit_passes():
    requests = FakeRequestsRepo({(1, RequestType.LEAVE): 1})
    v = RequestValidator(requests, FakeLimitsRepo({LimitType.LEAVE: 2}), FakeRosterRepo())
    assert v.validate(1, date(2026, 3, 10)).passed is True


def test_zero_limit_blocks_every_request():
    v = RequestValidator(FakeRequestsRepo(), FakeLimitsRepo({LimitType.LEAVE: 0}), FakeRosterRepo())
    assert v.validate(1, date(2026, 3, 10), RequestType.PERMISSION).passed is False


def test_roster_conflict_blocks_leave_and_permission():
    day = date(2026, 3, 10)
    v = RequestValidator(FakeRequestsRepo(), FakeLimitsRepo(), FakeRosterRepo([_entry(1, day)]))

    for request_type in (RequestType.LEAVE, RequestType.PERMISSION):
        result = v.validate(1, day, request_type)
        assert result.passed is False
        assert result.message == (
            "You have a duty scheduled on 2026-03-10. Please request a shift adjustment instead."
        )


def test_roster_conflict_skipped_for_swaps_and_shift_changes():
    day = date(2026, 3, 10)
    v = RequestValidator(FakeRequestsRepo(), FakeLimitsRepo(), FakeRosterRepo([_entry(1, day)]))

    assert v.validate(1, day, RequestType.SHIFT_SWAP).passed is True
    assert v.validate(1, day, RequestType.SHIFT).passed is True


def test_swap_still_subject_to_leave_limit():
    requests = FakeRequestsRepo({(1, RequestType.LEAVE): 3})
    v = RequestValidator(requests, FakeLimitsRepo({LimitType.LEAVE: 3}), FakeRosterRepo())

    result = v.validate(1, date(2026, 3, 10), RequestType.SHIFT_SWAP)

    assert result.passed is False
    assert "monthly limit of 3 leave requests" in result.message


def test_permission_checked_against_its_own_limit():
    requests = FakeRequestsRepo({(1, RequestType.PERMISSION): 1})
    limits = FakeLimitsRepo({LimitType.LEAVE: 5, LimitType.PERMISSION: 1})
    v = RequestValidator(requests, limits, FakeRosterRepo())

    result = v.validate(1, date(2026, 3, 10), RequestType.PERMISSION)

    assert result.passed is False
    assert result.message == "You have reached your monthly limit of 1 permission requests."


def test_store_errors_fail_closed_with_generic_message():
    broken = BrokenRepo()
    v = RequestValidator(broken, broken, broken)

    result = v.validate(1, date(2026, 3, 10), RequestType.LEAVE)

    assert result.passed is False
    assert result.message == "Could not verify monthly limit."


def test_unexpected_errors_are_reported_not_raised():
    v = RequestValidator(FakeRequestsRepo(), FakeLimitsRepo(), FakeRosterRepo())

    result = v.validate(1, date(2026, 3, 10), "vacation")

    assert result.passed is False
    assert result.message == GENERIC_VALIDATION_ERROR
