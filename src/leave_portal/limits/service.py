from __future__ import annotations

import logging
from typing import Mapping

from ..core.constants import MAX_MONTHLY_LIMIT
from ..core.enums import LimitType, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..database.connection import DatabaseConnection
from .repository import LimitRepository

logger = logging.getLogger(__name__)


class LimitService:
    def __init__(self, limits: LimitRepository, conn: DatabaseConnection):
        self._limits = limits
        self._conn = conn

    def current(self) -> dict[str, int]:
        return {lim.limit_type.value: lim.value for lim in self._limits.list_all()}

    def save(self, *, current_role: Role, values: Mapping[str, object]) -> dict[str, int]:
        if current_role != Role.HOD:
            raise AuthorizationError("Only an HOD can set monthly limits")

        parsed: dict[LimitType, int] = {}
        for key, raw in values.items():
            try:
                limit_type = LimitType(str(key).strip().lower())
            except ValueError:
                raise ValidationError(f"Unknown limit type: {key}")
            if raw is None or str(raw).strip() == "":
                raise ValidationError(f"{limit_type.value}: this field is required")
            try:
                value = int(str(raw).strip())
            except ValueError:
                raise ValidationError(f"{limit_type.value}: must be a whole number")
            if value < 0:
                raise ValidationError(f"{limit_type.value}: must not be negative")
            if value > MAX_MONTHLY_LIMIT:
                raise ValidationError(f"{limit_type.value}: cannot exceed {MAX_MONTHLY_LIMIT}")
            parsed[limit_type] = value

        if not parsed:
            raise ValidationError("No limits submitted")

        with self._conn.transaction():
            for limit_type, value in parsed.items():
                self._limits.upsert(limit_type, value)

        logger.info("Monthly limits updated: %s", {k.value: v for k, v in parsed.items()})
        return self.current()
