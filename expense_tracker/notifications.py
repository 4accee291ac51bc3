"""
Transient Notifications

Short confirmation messages ("Expense added successfully!") that disappear
on their own after a few seconds.

There are no timers or threads: the caller passes the current time, and a
notification simply stops being current once its duration has passed.
A new notification replaces the old one; dismiss() removes it early.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_DURATION_SECONDS = 3.0


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Notification(BaseModel):
    """A message and the moment it stops being shown."""

    message: str = Field(..., min_length=1)
    shown_at: datetime
    expires_at: datetime

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at


class NotificationCenter:
    """Holds at most one notification at a time."""

    def __init__(self, duration_seconds: float = DEFAULT_DURATION_SECONDS):
        if duration_seconds <= 0:
            raise ValueError("duration_seconds must be positive")
        self._duration = timedelta(seconds=duration_seconds)
        self._current: Optional[Notification] = None

    def show(self, message: str, now: Optional[datetime] = None) -> Notification:
        """Show message, replacing whatever was showing."""
        now = now or _now()
        self._current = Notification(
            message=message,
            shown_at=now,
            expires_at=now + self._duration,
        )
        return self._current

    def dismiss(self) -> None:
        self._current = None

    def current(self, now: Optional[datetime] = None) -> Optional[Notification]:
        """The notification to display right now, if any."""
        if self._current is None:
            return None
        if not self._current.is_active(now or _now()):
            self._current = None
        return self._current
