from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import SwapStatus
from .model import ShiftSwap


class ShiftSwapRepository(Protocol):
    def create(
        self,
        *,
        requester_id: int,
        target_id: int,
        swap_date: date,
        requester_shift: str,
        target_shift: str,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get(self, *, swap_id: int) -> Optional[ShiftSwap]:
        raise NotImplementedError

    def update_status(self, *, swap_id: int, expected: SwapStatus, new: SwapStatus) -> bool:
        """Move the swap from ``expected`` to ``new``.

        Returns False when the swap is missing or no longer in ``expected``.
        """

        raise NotImplementedError

    def list_incoming(self, *, target_id: int) -> Sequence[dict]:
        """Swaps waiting for ``target_id`` to respond, joined with usernames."""

        raise NotImplementedError

    def list_pending_hod(self) -> Sequence[dict]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, limit: int = 200) -> Sequence[dict]:
        """Every swap the user requested or was asked to take part in."""

        raise NotImplementedError
