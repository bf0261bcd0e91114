from __future__ import annotations

from flask import Flask

from ..common.http import body, current_role, hod_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/admin/limits", methods=["GET"], endpoint="limits")
    @hod_required
    def limits():
        return ok(limits=container.limit_service.current())

    @app.route("/admin/limits", methods=["POST"], endpoint="save_limits")
    @hod_required
    def save_limits():
        saved = container.limit_service.save(current_role=current_role(), values=body())
        return ok("Monthly limits updated successfully", limits=saved)
