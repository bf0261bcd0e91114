from __future__ import annotations

from flask import Flask, request

from ..common.http import (
    body,
    current_role,
    current_user_id,
    hod_required,
    login_required,
    ok,
    parse_date_field,
    text_field,
)
from ..core.enums import RequestStatus, RequestType
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/requests", methods=["GET"], endpoint="my_requests")
    @login_required
    def my_requests():
        raw = (request.args.get("status") or "all").strip().lower()
        try:
            status = None if raw == "all" else RequestStatus(raw)
        except ValueError:
            raise ValidationError("status must be one of all, pending, approved, rejected")
        return ok(requests=container.request_service.list_my_requests(user_id=current_user_id(), status=status))

    @app.route("/requests/leave", methods=["POST"], endpoint="new_leave")
    @login_required
    def new_leave():
        data = body()
        request_id = container.request_service.submit_leave(
            current_role=current_role(),
            user_id=current_user_id(),
            start_date=parse_date_field(data, "start_date"),
            end_date=parse_date_field(data, "end_date", required=False),
            reason=text_field(data, "reason"),
        )
        return ok("Leave request submitted", 201, request_id=request_id)

    @app.route("/requests/permission", methods=["POST"], endpoint="new_permission")
    @login_required
    def new_permission():
        data = body()
        request_id = container.request_service.submit_permission(
            current_role=current_role(),
            user_id=current_user_id(),
            work_date=parse_date_field(data, "date"),
            start_time=text_field(data, "start_time"),
            end_time=text_field(data, "end_time"),
            reason=text_field(data, "reason"),
        )
        return ok("Permission request submitted", 201, request_id=request_id)

    @app.route("/requests/shift", methods=["POST"], endpoint="new_shift_change")
    @login_required
    def new_shift_change():
        data = body()
        request_id = container.request_service.submit_shift_change(
            current_role=current_role(),
            user_id=current_user_id(),
            work_date=parse_date_field(data, "date"),
            requested_shift=text_field(data, "requested_shift"),
            reason=text_field(data, "reason"),
        )
        return ok("Shift change request submitted", 201, request_id=request_id)

    @app.route("/requests/validate", methods=["POST"], endpoint="validate_request")
    @login_required
    def validate_request():
        data = body()
        try:
            request_type = RequestType(data.get("request_type") or RequestType.LEAVE.value)
        except ValueError:
            raise ValidationError("Unknown request type")

        result = container.request_service.validate(
            user_id=current_user_id(),
            work_date=parse_date_field(data, "date"),
            request_type=request_type,
        )
        return ok(result.message, passed=result.passed)

    @app.route("/admin/requests", methods=["GET"], endpoint="pending_requests")
    @hod_required
    def pending_requests():
        return ok(requests=container.request_service.list_pending(current_role=current_role()))

    @app.route("/admin/requests/history", methods=["GET"], endpoint="request_history")
    @hod_required
    def request_history():
        return ok(requests=container.request_service.list_history(current_role=current_role()))

    @app.route("/admin/requests/<int:request_id>/approve", methods=["POST"], endpoint="approve_request")
    @hod_required
    def approve_request(request_id: int):
        req = container.request_service.approve(
            current_role=current_role(), hod_user_id=current_user_id(), request_id=request_id
        )
        return ok("Request has been approved successfully.", request_id=req.request_id, status=req.status.value)

    @app.route("/admin/requests/<int:request_id>/reject", methods=["POST"], endpoint="reject_request")
    @hod_required
    def reject_request(request_id: int):
        req = container.request_service.reject(
            current_role=current_role(), hod_user_id=current_user_id(), request_id=request_id
        )
        return ok("Request has been rejected successfully.", request_id=req.request_id, status=req.status.value)
