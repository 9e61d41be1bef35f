"""
Scheduler component output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class TickResult:
    """Outcome of one publication tick."""

    started_at: datetime
    published: dict[str, int] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)
    skipped: bool = False

    @property
    def total_published(self) -> int:
        return sum(self.published.values())

    @property
    def success(self) -> bool:
        return not self.skipped and not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "published": dict(self.published),
            "errors": dict(self.errors),
            "skipped": self.skipped,
            "total_published": self.total_published,
        }
