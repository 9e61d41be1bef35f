"""
Scheduler component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol


class PublishableRepoPort(Protocol):
    """A content store that can promote due drafts in bulk."""

    def publish_due(self, now: datetime) -> int:
        """
        Set status='published' and publish_date=now on every draft whose
        scheduled_date <= now, as one conditional update.

        Returns:
            Number of items promoted.
        """
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
