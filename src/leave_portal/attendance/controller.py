from __future__ import annotations

from flask import Flask, request

from ..common.http import body, current_role, hod_required, ok, parse_date_field
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/attendance", methods=["GET"], endpoint="attendance_for_date")
    @hod_required
    def attendance_for_date():
        work_date = parse_date_field(request.args.to_dict(), "date")
        return ok(date=work_date.isoformat(), attendance=container.attendance_service.for_date(work_date=work_date))

    @app.route("/admin/attendance", methods=["POST"], endpoint="mark_attendance")
    @hod_required
    def mark_attendance():
        data = body()
        work_date = parse_date_field(data, "date")
        statuses = data.get("statuses") or {}
        if not isinstance(statuses, dict):
            raise ValidationError("statuses must map user ids to Present, Absent or Leave")

        saved = container.attendance_service.mark_day(
            current_role=current_role(), work_date=work_date, statuses=statuses
        )
        return ok(
            f"Attendance for {work_date.isoformat()} saved.",
            attendance={str(user_id): status.value for user_id, status in saved.items()},
        )
