"""
Categories component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from castpress.domain.entities import Category


class CategoryRepoPort(Protocol):
    def get_by_id(self, category_id: UUID) -> Category | None:
        ...

    def get_by_name(self, name: str) -> Category | None:
        ...

    def list_by_type(self, category_type: str | None = None) -> list[Category]:
        """Categories of category_type or 'both', ordered by name; all when None."""
        ...

    def save(self, category: Category) -> Category:
        """Insert or update by id. Raises DuplicateValueError on a taken name."""
        ...

    def delete(self, category_id: UUID) -> bool:
        ...


class TimePort(Protocol):
    def now_utc(self) -> datetime:
        ...
