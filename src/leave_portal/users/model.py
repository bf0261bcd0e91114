from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: A plain data object (no DB access code).
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None

    @property
    def is_hod(self) -> bool:
        return self.role == Role.HOD
