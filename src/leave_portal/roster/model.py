from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DutyRosterEntry:
    roster_id: int
    user_id: int
    work_date: date
    shift_type: str
