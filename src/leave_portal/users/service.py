from __future__ import annotations

import logging
from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, MIN_USERNAME_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    username: str
    role: Role


class AuthService:
    """Use case: register and authenticate users."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, username: str, password: str, role: Role = Role.EMPLOYEE) -> int:
        username = require_non_empty(username, "Username")
        require_min_length(username, "Username", MIN_USERNAME_LENGTH)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user_id = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=Role(role),
        )
        logger.info("Registered user %s (%s) as %s", user_id, username, Role(role).value)
        return user_id

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionUser(user_id=user.user_id, username=user.username, role=user.role)

    def change_password(self, *, user_id: int, current_password: str, new_password: str) -> None:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        if not check_password_hash(user.password_hash, current_password or ""):
            raise AuthenticationError("Current password is incorrect")
        require_min_length(new_password, "Password", MIN_PASSWORD_LENGTH)

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))


class UserService:
    """Use case: look up users for HOD screens and the workflows."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_employees(self):
        return self._users.list_by_role(Role.EMPLOYEE)

    def list_hods(self):
        return self._users.list_by_role(Role.HOD)
