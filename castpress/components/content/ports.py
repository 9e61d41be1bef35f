"""
Content component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from castpress.components.listing.models import ListQuery
from castpress.domain.entities import AnyContent


class ContentRepoPort(Protocol):
    """Repository interface for one content kind."""

    def get_by_id(self, item_id: UUID) -> AnyContent | None:
        ...

    def get_by_slug(self, slug: str) -> AnyContent | None:
        ...

    def slug_exists(self, slug: str, exclude_id: UUID | None = None) -> bool:
        """True if another item already uses slug."""
        ...

    def save(self, item: AnyContent) -> AnyContent:
        """Insert or update by id. Raises DuplicateValueError on a taken slug."""
        ...

    def update_fields(self, item_id: UUID, changes: dict[str, Any]) -> bool:
        """Write only the named fields of one item; False if it does not exist."""
        ...

    def delete(self, item_id: UUID) -> bool:
        ...

    def find(self, query: ListQuery) -> list[AnyContent]:
        """Items matching query.filters, sorted and paginated."""
        ...

    def count(self, query: ListQuery) -> int:
        """Total matching query.filters, ignoring pagination."""
        ...

    def count_by_status(self) -> dict[str, int]:
        ...


class MediaCleanupPort(Protocol):
    """Removes stored media referenced by a deleted item."""

    def delete_urls(self, urls: list[str]) -> int:
        """Best-effort delete; never raises. Returns how many objects were removed."""
        ...


class TimePort(Protocol):
    """Port for time operations."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
