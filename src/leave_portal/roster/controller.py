from __future__ import annotations

from flask import Flask, request

from ..common.http import body, current_role, current_user_id, hod_required, login_required, ok, parse_date_field
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/roster", methods=["GET"], endpoint="roster_for_date")
    @hod_required
    def roster_for_date():
        work_date = parse_date_field(request.args.to_dict(), "date")
        return ok(date=work_date.isoformat(), roster=container.roster_service.roster_for_date(work_date=work_date))

    @app.route("/admin/roster", methods=["POST"], endpoint="save_roster")
    @hod_required
    def save_roster():
        data = body()
        work_date = parse_date_field(data, "date")
        assignments = data.get("assignments")
        if not isinstance(assignments, dict):
            raise ValidationError("assignments must map user ids to shifts")
        try:
            assignments = {int(user_id): shift for user_id, shift in assignments.items()}
        except ValueError:
            raise ValidationError("assignments must map user ids to shifts")

        on_duty = container.roster_service.save_day(
            current_role=current_role(), work_date=work_date, assignments=assignments
        )
        return ok(f"Roster for {work_date.isoformat()} saved.", on_duty=on_duty)

    @app.route("/roster", methods=["GET"], endpoint="my_roster")
    @login_required
    def my_roster():
        args = request.args.to_dict()
        start = parse_date_field(args, "start")
        end = parse_date_field(args, "end")
        entries = container.roster_service.roster_for_user(user_id=current_user_id(), start=start, end=end)
        return ok(
            roster=[{"date": e.work_date.isoformat(), "shift_type": e.shift_type} for e in entries]
        )
