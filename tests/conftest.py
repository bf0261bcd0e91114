from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import generate_password_hash

from leave_portal.container import build_container
from leave_portal.core.enums import Role
from leave_portal.database.bootstrap import apply_schema
from leave_portal.database.connection import SQLiteConnection


@pytest.fixture
def store(tmp_path):
    conn = SQLiteConnection(tmp_path / "leave_portal.db")
    apply_schema(conn)
    yield conn
    conn.close()


@pytest.fixture
def container(store):
    return build_container(conn=store)


@pytest.fixture
def add_user(container):
    def _add(username: str, role: Role = Role.EMPLOYEE, password: str = "secret123") -> int:
        return container.users_repo.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )

    return _add


@pytest.fixture
def staff(container, add_user):
    """One HOD and two employees, both rostered on 2026-03-10."""

    hod = add_user("hod", Role.HOD)
    alice = add_user("alice")
    bob = add_user("bob")
    day = date(2026, 3, 10)
    container.roster_repo.upsert(user_id=alice, work_date=day, shift_type="Morning")
    container.roster_repo.upsert(user_id=bob, work_date=day, shift_type="Night")
    return {"hod": hod, "alice": alice, "bob": bob, "day": day}
