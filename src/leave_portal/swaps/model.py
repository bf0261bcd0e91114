from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import SwapStatus


@dataclass(frozen=True)
class ShiftSwap:
    """Two employees exchanging their duty shifts on one date."""

    swap_id: int
    requester_id: int
    target_id: int
    swap_date: date
    requester_shift: str
    target_shift: str
    reason: str
    status: SwapStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

