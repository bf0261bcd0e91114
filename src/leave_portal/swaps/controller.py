from __future__ import annotations

from flask import Flask

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
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _target_id(data: dict) -> int:
        try:
            return int(data.get("target_id"))
        except (TypeError, ValueError):
            raise ValidationError("Please select an employee to swap with")

    @app.route("/swaps", methods=["GET"], endpoint="my_swaps")
    @login_required
    def my_swaps():
        return ok(swaps=container.swap_service.list_for_user(user_id=current_user_id()))

    @app.route("/swaps", methods=["POST"], endpoint="new_swap")
    @login_required
    def new_swap():
        data = body()
        swap_id = container.swap_service.request_swap(
            current_role=current_role(),
            requester_id=current_user_id(),
            target_id=_target_id(data),
            swap_date=parse_date_field(data, "date"),
            reason=text_field(data, "reason"),
        )
        return ok("Your shift swap request has been sent for approval.", 201, swap_id=swap_id)

    @app.route("/swaps/incoming", methods=["GET"], endpoint="incoming_swaps")
    @login_required
    def incoming_swaps():
        return ok(swaps=container.swap_service.list_incoming(user_id=current_user_id()))

    @app.route("/swaps/<int:swap_id>/accept", methods=["POST"], endpoint="accept_swap")
    @login_required
    def accept_swap(swap_id: int):
        status = container.swap_service.respond(user_id=current_user_id(), swap_id=swap_id, accept=True)
        return ok(f"Shift swap is now {status.value.replace('_', ' ')}.", swap_id=swap_id, status=status.value)

    @app.route("/swaps/<int:swap_id>/reject", methods=["POST"], endpoint="reject_swap")
    @login_required
    def reject_swap(swap_id: int):
        status = container.swap_service.respond(user_id=current_user_id(), swap_id=swap_id, accept=False)
        return ok("Shift swap request declined.", swap_id=swap_id, status=status.value)

    @app.route("/admin/swaps", methods=["GET"], endpoint="pending_swaps")
    @hod_required
    def pending_swaps():
        return ok(swaps=container.swap_service.list_pending_hod(current_role=current_role()))

    @app.route("/admin/swaps/<int:swap_id>/approve", methods=["POST"], endpoint="approve_swap")
    @hod_required
    def approve_swap(swap_id: int):
        status = container.swap_service.hod_decide(
            current_role=current_role(), hod_user_id=current_user_id(), swap_id=swap_id, approve=True
        )
        return ok("Shift swap approved and roster updated.", swap_id=swap_id, status=status.value)

    @app.route("/admin/swaps/<int:swap_id>/reject", methods=["POST"], endpoint="reject_swap_hod")
    @hod_required
    def reject_swap_hod(swap_id: int):
        status = container.swap_service.hod_decide(
            current_role=current_role(), hod_user_id=current_user_id(), swap_id=swap_id, approve=False
        )
        return ok("Shift swap rejected.", swap_id=swap_id, status=status.value)
