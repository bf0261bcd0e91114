from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Notification:
    notification_id: int
    user_id: int
    message: str
    is_read: bool
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PendingNotification:
    """A notification planned by a workflow, delivered after its transaction commits."""

    user_id: int
    message: str
