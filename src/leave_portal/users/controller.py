from __future__ import annotations

from datetime import timedelta

from flask import Flask, session

from ..common.http import body, current_role, current_user_id, hod_required, login_required, ok, text_field
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/register", methods=["POST"], endpoint="register")
    def register_user():
        data = body()
        try:
            role = Role(data.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Role must be Employee or HOD")

        user_id = container.auth_service.register(
            username=text_field(data, "username"),
            password=text_field(data, "password"),
            role=role,
        )
        return ok("Registration successful", 201, user_id=user_id)

    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = body()
        s_user = container.auth_service.authenticate(text_field(data, "username"), text_field(data, "password"))

        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=7)
        session["user_id"] = s_user.user_id
        session["username"] = s_user.username
        session["role"] = s_user.role.value

        return ok(
            "Login successful",
            user={"user_id": s_user.user_id, "username": s_user.username, "role": s_user.role.value},
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok("Logged out")

    @app.route("/auth/password", methods=["POST"], endpoint="change_password")
    @login_required
    def change_password():
        data = body()
        container.auth_service.change_password(
            user_id=current_user_id(),
            current_password=text_field(data, "current_password"),
            new_password=text_field(data, "new_password"),
        )
        return ok("Password updated")

    @app.route("/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return ok(
            user={"user_id": current_user_id(), "username": session.get("username"), "role": current_role().value},
            unread_notifications=container.notification_service.unread_count(user_id=current_user_id()),
            request_stats=container.request_service.request_stats(user_id=current_user_id()),
        )

    @app.route("/employees", methods=["GET"], endpoint="employees")
    @login_required
    def employees():
        # Employees pick swap partners from this list; HODs use it for roster and attendance.
        return ok(
            employees=[
                {"user_id": u.user_id, "username": u.username}
                for u in container.user_service.list_employees()
            ]
        )

    @app.route("/admin/hods", methods=["GET"], endpoint="hods")
    @hod_required
    def hods():
        return ok(hods=[{"user_id": u.user_id, "username": u.username} for u in container.user_service.list_hods()])
