from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DutyRosterEntry


class RosterRepository(Protocol):
    def get_for_user_and_date(self, *, user_id: int, work_date: date) -> Optional[DutyRosterEntry]:
        raise NotImplementedError

    def upsert(self, *, user_id: int, work_date: date, shift_type: str) -> int:
        """Create or update the roster entry for (user_id, work_date).

        Returns roster_id.
        """

        raise NotImplementedError

    def delete_for_user_and_date(self, *, user_id: int, work_date: date) -> bool:
        raise NotImplementedError

    def list_for_date(self, *, work_date: date) -> Sequence[dict]:
        """Entries for one day joined with username."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: int, start: date, end: date) -> Sequence[DutyRosterEntry]:
        raise NotImplementedError
