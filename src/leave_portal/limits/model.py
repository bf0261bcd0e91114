from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import LimitType


@dataclass(frozen=True)
class MonthlyLimit:
    limit_type: LimitType
    value: int
