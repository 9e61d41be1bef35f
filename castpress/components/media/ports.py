"""
Media component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from castpress.core.ports.storage import MediaStorePort


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


__all__ = ["MediaStorePort", "TimePort"]
