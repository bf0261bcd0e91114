from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import LimitType
from .model import MonthlyLimit


class LimitRepository(Protocol):
    def get(self, limit_type: LimitType) -> Optional[int]:
        """Stored limit value, or None when no limit is set (unlimited)."""

        raise NotImplementedError

    def upsert(self, limit_type: LimitType, value: int) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[MonthlyLimit]:
        raise NotImplementedError
